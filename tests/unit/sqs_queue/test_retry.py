"""
Module: test_retry.py
Description: Unit tests for transient-error classification and retry.
"""

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError
from unittest.mock import AsyncMock

from ya_sqs.sqs_queue.retry import call_with_retry, is_transient_error


def client_error(code):
    return ClientError({"Error": {"Code": code, "Message": "test"}}, "SendMessage")


class TestIsTransientError:
    """Test cases for is_transient_error."""

    @pytest.mark.parametrize("code", ["Throttling", "ThrottlingException", "ServiceUnavailable", "503"])
    def test_transient_codes(self, code):
        assert is_transient_error(client_error(code))

    @pytest.mark.parametrize("code", ["AccessDenied", "InvalidParameterValue", "ReceiptHandleIsInvalid"])
    def test_permanent_codes(self, code):
        assert not is_transient_error(client_error(code))

    def test_connection_errors(self):
        assert is_transient_error(EndpointConnectionError(endpoint_url="https://sqs"))
        assert not is_transient_error(NoCredentialsError())
        assert not is_transient_error(ValueError("bad"))


class TestCallWithRetry:
    """Test cases for call_with_retry."""

    @pytest.mark.asyncio
    async def test_returns_first_success(self):
        func = AsyncMock(return_value="ok")

        assert await call_with_retry(func, 1, key="v", attempts=3) == "ok"
        func.assert_awaited_once_with(1, key="v")

    @pytest.mark.asyncio
    async def test_gives_up_after_attempts(self):
        """Test the last transient error is raised once attempts run out."""
        func = AsyncMock(side_effect=client_error("InternalError"))

        with pytest.raises(ClientError):
            await call_with_retry(func, attempts=2)

        assert func.await_count == 2
