"""
Module: publisher.py
Description: Single and batch message publication.

Formats values with the queue's formatter, stamps the resolved queue URL,
sends them through the transport and emits `message pushed` for every
value the transport accepted.
"""

from typing import Any, List, Sequence

from ..exceptions import FormattingError
from ..formatters.base import Formatter
from ..models.events import QueueEvent
from ..models.message import BatchEntry, BatchResult, OutgoingMessage
from ..utils.awaitables import resolve
from ..utils.batch_helpers import batch_entry_id, validate_batch_size
from ..utils.events import EventNotifier
from ..utils.logger import get_logger
from .resolver import QueueUrlResolver
from .transport import Transport

logger = get_logger(__name__)

SQS_MAX_BODY_BYTES = 256 * 1024


class Publisher:
    """Send formatted values to one queue."""

    def __init__(
        self,
        resolver: QueueUrlResolver,
        formatter: Formatter,
        client: Transport,
        notifier: EventNotifier
    ):
        self.resolver = resolver
        self.formatter = formatter
        self.client = client
        self.notifier = notifier

    async def push(self, value: Any) -> str:
        """
        Publish one value.

        Args:
            value: Application value to format and send

        Returns:
            Transport message id

        Raises:
            ResolutionError: If the queue URL can't be resolved
            FormattingError: If the value can't be encoded
            ClientError: If the send call fails
        """
        queue_url = await self.resolver.resolve()
        message = await self.format(value)

        message_id = await self.client.send_message(queue_url, message)

        logger.info("Message pushed", queue_url=queue_url, message_id=message_id)
        self.notifier.emit(QueueEvent.pushed(value, queue_url))
        return message_id

    async def mpush(self, values: Sequence[Any]) -> BatchResult:
        """
        Publish several values in one batch call.

        Every value is formatted before anything is sent, so a single
        formatting failure fails the whole batch. Entries are identified as
        ``batch_0 .. batch_{n-1}`` in submission order. Entries the
        transport refuses are reported in the result and not retried.

        Args:
            values: Up to 10 application values

        Returns:
            BatchResult with per-entry outcome
        """
        validate_batch_size(values)
        values = list(values)
        if not values:
            return BatchResult()

        queue_url = await self.resolver.resolve()

        entries: List[BatchEntry] = []
        for index, value in enumerate(values):
            entries.append(BatchEntry(id=batch_entry_id(index), message=await self.format(value)))

        result = await self.client.send_message_batch(queue_url, entries)

        logger.info(
            "Batch pushed",
            queue_url=queue_url,
            sent=len(result.successful),
            failed=len(result.failed)
        )

        for entry, value in zip(entries, values):
            if entry.id in result.successful:
                self.notifier.emit(QueueEvent.pushed(value, queue_url))

        return result

    async def format(self, value: Any) -> OutgoingMessage:
        """Encode ``value`` with the formatter and check the SQS size limit."""
        try:
            message = await resolve(self.formatter.format(value))
        except Exception as e:
            logger.warning("Message formatting failed", error=str(e), error_type=type(e).__name__)
            raise FormattingError(f"Unable to format message: {e}") from e

        if isinstance(message, str):
            message = OutgoingMessage(body=message)
        elif not isinstance(message, OutgoingMessage):
            raise FormattingError(
                f"Formatter returned {type(message).__name__}, expected OutgoingMessage"
            )

        if len(message.body.encode("utf-8")) > SQS_MAX_BODY_BYTES:
            raise FormattingError("Message body exceeds the 256 KiB SQS limit")

        return message
