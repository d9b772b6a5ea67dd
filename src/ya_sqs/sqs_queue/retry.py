"""
Module: retry.py
Description: Retry logic for SQS transport calls.

Retries throttling, 5xx and connection-level failures with exponential
backoff and jitter. Any other error is raised on the first attempt.
"""

import logging
from typing import Any, Awaitable, Callable

from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from ..utils.logger import get_logger

logger = get_logger(__name__)

RETRIABLE_ERROR_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestThrottled",
    "ServiceUnavailable",
    "InternalError",
    "InternalFailure",
    "RequestTimeout",
    "500",
    "502",
    "503",
    "504",
}


def is_transient_error(error: BaseException) -> bool:
    """True if ``error`` is worth retrying."""
    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code", "")
        return code in RETRIABLE_ERROR_CODES
    return isinstance(error, (EndpointConnectionError, ConnectionClosedError, ReadTimeoutError))


async def call_with_retry(
    func: Callable[..., Awaitable[Any]],
    *args: Any,
    attempts: int,
    **kwargs: Any
) -> Any:
    """
    Await ``func(*args, **kwargs)``, retrying transient failures.

    Args:
        func: Coroutine function performing one SQS call
        attempts: Total attempts, including the first

    Returns:
        Result of the first successful attempt

    Raises:
        The last error when attempts are exhausted, or any non-transient error
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_random_exponential(multiplier=0.25, max=5),
        retry=retry_if_exception(is_transient_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    ):
        with attempt:
            return await func(*args, **kwargs)
