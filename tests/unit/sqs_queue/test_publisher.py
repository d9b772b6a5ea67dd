"""
Module: test_publisher.py
Description: Unit tests for push and mpush.

Tests formatting, batch id assignment, event emission and failure
surfacing with the in-memory transport and mocked transports.
"""

import asyncio

import pytest
from botocore.exceptions import ClientError
from unittest.mock import AsyncMock

from ya_sqs.exceptions import FormattingError, ResolutionError
from ya_sqs.models.message import BatchEntryFailure, BatchResult, OutgoingMessage


class TestPush:
    """Test cases for single message publication."""

    @pytest.mark.asyncio
    async def test_push_sends_formatted_value(self, make_queue, transport, recorder):
        """Test push formats the value and emits message pushed with the original value."""
        queue = make_queue()
        events = recorder(queue)
        send = AsyncMock(side_effect=transport.send_message)
        transport.send_message = send

        message_id = await queue.push({"order_id": "12345"})

        assert message_id.startswith("msg-")
        url, message = send.await_args.args
        assert url == "memory://jobs"
        assert message == OutgoingMessage(body='{"order_id": "12345"}')
        pushed = events.of("message pushed")
        assert len(pushed) == 1
        assert pushed[0].value == {"order_id": "12345"}
        assert pushed[0].queue_url == "memory://jobs"

    @pytest.mark.asyncio
    async def test_push_circular_value_fails(self, make_queue, transport, recorder):
        """Test an unserialisable value fails without sending or emitting."""
        queue = make_queue()
        events = recorder(queue)
        transport.send_message = AsyncMock()
        foo = {}
        foo["foo"] = foo

        with pytest.raises(FormattingError, match="Unable to format message"):
            await queue.push(foo)

        transport.send_message.assert_not_awaited()
        assert events.of("message pushed") == []

    @pytest.mark.asyncio
    async def test_push_oversized_body_fails(self, make_queue, transport):
        """Test bodies above 256 KiB are rejected before sending."""
        queue = make_queue()
        transport.send_message = AsyncMock()

        with pytest.raises(FormattingError, match="256 KiB"):
            await queue.push("x" * (256 * 1024))

        transport.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_push_send_failure_propagates(self, make_queue, transport, recorder):
        """Test transport errors reach the caller and no event is emitted."""
        queue = make_queue()
        events = recorder(queue)
        transport.send_message = AsyncMock(side_effect=ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "SendMessage"
        ))

        with pytest.raises(ClientError):
            await queue.push("hello")

        assert events.of("message pushed") == []

    @pytest.mark.asyncio
    async def test_push_resolution_failure(self, make_queue, transport):
        """Test push surfaces ResolutionError when the queue can't be created."""
        transport.create_queue = AsyncMock(side_effect=ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "CreateQueue"
        ))
        queue = make_queue()

        with pytest.raises(ResolutionError):
            await queue.push("hello")

    @pytest.mark.asyncio
    async def test_push_with_async_formatter(self, make_queue, transport):
        """Test formatters may return awaitables."""
        class UpperFormatter:
            async def format(self, value):
                await asyncio.sleep(0)
                return OutgoingMessage(body=value.upper())

            async def parse(self, message):
                return message.body.lower()

        queue = make_queue(formatter=UpperFormatter())
        await queue.push("hello")

        received = await transport.receive_messages("memory://jobs", 1, 0)
        assert received[0].body == "HELLO"

    @pytest.mark.asyncio
    async def test_push_formatter_returning_string(self, make_queue, transport):
        """Test a plain string from a formatter is used as the body."""
        class RawFormatter:
            def format(self, value):
                return str(value)

            def parse(self, message):
                return message.body

        queue = make_queue(formatter=RawFormatter())
        await queue.push(42)

        received = await transport.receive_messages("memory://jobs", 1, 0)
        assert received[0].body == "42"

    @pytest.mark.asyncio
    async def test_push_formatter_wrong_type(self, make_queue):
        """Test formatters must return an OutgoingMessage."""
        class BrokenFormatter:
            def format(self, value):
                return {"MessageBody": value}

            def parse(self, message):
                return message.body

        queue = make_queue(formatter=BrokenFormatter())

        with pytest.raises(FormattingError, match="expected OutgoingMessage"):
            await queue.push("hello")


class TestMpush:
    """Test cases for batch publication."""

    @pytest.mark.asyncio
    async def test_mpush_assigns_positional_ids(self, make_queue, transport, recorder):
        """Test one batch call with batch_0..batch_2 and pushed events in order."""
        queue = make_queue()
        events = recorder(queue)
        send_batch = AsyncMock(side_effect=transport.send_message_batch)
        transport.send_message_batch = send_batch

        result = await queue.mpush(["a", "b", "c"])

        assert send_batch.await_count == 1
        url, entries = send_batch.await_args.args
        assert url == "memory://jobs"
        assert [entry.id for entry in entries] == ["batch_0", "batch_1", "batch_2"]
        assert [entry.message.body for entry in entries] == ['"a"', '"b"', '"c"']
        assert result.all_successful
        assert set(result.successful) == {"batch_0", "batch_1", "batch_2"}
        assert [event.value for event in events.of("message pushed")] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_mpush_format_failure_fails_whole_batch(self, make_queue, transport, recorder):
        """Test one unserialisable value fails the batch before any call."""
        queue = make_queue()
        events = recorder(queue)
        transport.send_message_batch = AsyncMock()
        circular = []
        circular.append(circular)

        with pytest.raises(FormattingError):
            await queue.mpush(["a", circular, "c"])

        transport.send_message_batch.assert_not_awaited()
        assert events.of("message pushed") == []

    @pytest.mark.asyncio
    async def test_mpush_partial_failure(self, make_queue, transport, recorder):
        """Test refused entries are returned, not retried, and get no event."""
        queue = make_queue()
        events = recorder(queue)
        transport.send_message_batch = AsyncMock(return_value=BatchResult(
            successful={"batch_0": "m-0", "batch_2": "m-2"},
            failed=[BatchEntryFailure(id="batch_1", code="InternalError", message="try again")]
        ))

        result = await queue.mpush(["a", "b", "c"])

        assert transport.send_message_batch.await_count == 1
        assert not result.all_successful
        assert result.failed[0].id == "batch_1"
        assert [event.value for event in events.of("message pushed")] == ["a", "c"]

    @pytest.mark.asyncio
    async def test_mpush_empty(self, make_queue, transport):
        """Test an empty batch makes no call."""
        queue = make_queue()
        transport.send_message_batch = AsyncMock()
        transport.create_queue = AsyncMock()

        result = await queue.mpush([])

        assert result == BatchResult()
        transport.send_message_batch.assert_not_awaited()
        transport.create_queue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mpush_too_many_values(self, make_queue, transport):
        """Test more than 10 values are rejected before any call."""
        queue = make_queue()
        transport.send_message_batch = AsyncMock()

        with pytest.raises(ValueError, match="batch size cannot exceed 10 items"):
            await queue.mpush(list(range(11)))

        transport.send_message_batch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_push_and_mpush_share_resolution(self, make_queue, transport):
        """Test concurrent publishers resolve the queue once."""
        async def create(name, attributes=None):
            await asyncio.sleep(0.01)
            return "memory://jobs"

        await transport.create_queue("jobs")
        transport.create_queue = AsyncMock(side_effect=create)
        queue = make_queue()

        await asyncio.gather(queue.push("a"), queue.mpush(["b", "c"]), queue.resolve_url())

        assert transport.create_queue.await_count == 1
        assert transport.pending_count("memory://jobs") == 3
