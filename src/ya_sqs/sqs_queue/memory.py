"""
Module: memory.py
Description: In-process transport suitable for tests and local runs.

Mimics the SQS behaviour the queue core relies on: long polling,
single-use receipt handles, and messages staying hidden after receipt
until they are deleted or released back to the queue.
"""

import asyncio
import itertools
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Sequence

from botocore.exceptions import ClientError

from ..models.message import BatchEntry, BatchResult, OutgoingMessage, ReceivedMessage

URL_SCHEME = "memory://"


def _client_error(code: str, message: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


@dataclass
class _StoredMessage:
    message_id: str
    body: str
    attributes: Dict[str, str] = field(default_factory=dict)
    receive_count: int = 0


class _MemoryQueue:
    def __init__(self, name: str, attributes: Dict[str, str]):
        self.name = name
        self.attributes = attributes
        self.pending: Deque[_StoredMessage] = deque()
        self.in_flight: Dict[str, _StoredMessage] = {}
        self.arrived = asyncio.Condition()


class InMemoryTransport:
    """
    In-memory queue service.

    Queue URLs have the form ``memory://<name>``.

    Example:
        >>> transport = InMemoryTransport()
        >>> url = await transport.create_queue("jobs")
        >>> url
        'memory://jobs'
    """

    def __init__(self) -> None:
        self._queues: Dict[str, _MemoryQueue] = {}
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Transport implementation
    # ------------------------------------------------------------------
    async def create_queue(self, name: str, attributes: Optional[Dict[str, str]] = None) -> str:
        if not name:
            raise _client_error("InvalidParameterValue", "QueueName is required", "CreateQueue")
        url = URL_SCHEME + name
        if url not in self._queues:
            self._queues[url] = _MemoryQueue(name, dict(attributes or {}))
        return url

    async def send_message(self, queue_url: str, message: OutgoingMessage) -> str:
        queue = self._get(queue_url, "SendMessage")
        stored = self._store(message)
        await self._enqueue(queue, [stored])
        return stored.message_id

    async def send_message_batch(self, queue_url: str, entries: Sequence[BatchEntry]) -> BatchResult:
        queue = self._get(queue_url, "SendMessageBatch")
        if not entries:
            raise _client_error(
                "AWS.SimpleQueueService.EmptyBatchRequest",
                "There should be at least one entry in the request",
                "SendMessageBatch"
            )
        if len({entry.id for entry in entries}) != len(entries):
            raise _client_error(
                "AWS.SimpleQueueService.BatchEntryIdsNotDistinct",
                "Two or more batch entries have the same Id",
                "SendMessageBatch"
            )

        stored = [self._store(entry.message) for entry in entries]
        await self._enqueue(queue, stored)
        return BatchResult(
            successful={entry.id: item.message_id for entry, item in zip(entries, stored)}
        )

    async def receive_messages(
        self,
        queue_url: str,
        max_messages: int,
        wait_seconds: int
    ) -> List[ReceivedMessage]:
        queue = self._get(queue_url, "ReceiveMessage")

        if queue.pending:
            await asyncio.sleep(0)
        elif wait_seconds > 0:
            async with queue.arrived:
                try:
                    await asyncio.wait_for(
                        queue.arrived.wait_for(lambda: bool(queue.pending)),
                        timeout=wait_seconds
                    )
                except asyncio.TimeoutError:
                    return []
        else:
            await asyncio.sleep(0)
            return []

        received = []
        while queue.pending and len(received) < max_messages:
            stored = queue.pending.popleft()
            stored.receive_count += 1
            receipt_handle = f"rh-{stored.message_id}-{next(self._ids)}"
            queue.in_flight[receipt_handle] = stored
            received.append(ReceivedMessage(
                message_id=stored.message_id,
                body=stored.body,
                receipt_handle=receipt_handle,
                attributes={"ApproximateReceiveCount": str(stored.receive_count)},
                message_attributes=stored.attributes,
            ))
        return received

    async def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        queue = self._get(queue_url, "DeleteMessage")
        if queue.in_flight.pop(receipt_handle, None) is None:
            raise _client_error(
                "ReceiptHandleIsInvalid",
                f"The receipt handle '{receipt_handle}' is not valid",
                "DeleteMessage"
            )

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------
    def release(self, queue_url: str) -> int:
        """Return every in-flight message to the queue, as a visibility timeout would."""
        queue = self._get(queue_url, "ChangeMessageVisibility")
        released = list(queue.in_flight.values())
        queue.in_flight.clear()
        queue.pending.extendleft(reversed(released))
        return len(released)

    def pending_count(self, queue_url: str) -> int:
        return len(self._get(queue_url, "GetQueueAttributes").pending)

    def in_flight_count(self, queue_url: str) -> int:
        return len(self._get(queue_url, "GetQueueAttributes").in_flight)

    def _get(self, queue_url: str, operation: str) -> _MemoryQueue:
        try:
            return self._queues[queue_url]
        except KeyError:
            raise _client_error(
                "AWS.SimpleQueueService.NonExistentQueue",
                "The specified queue does not exist",
                operation
            ) from None

    def _store(self, message: OutgoingMessage) -> _StoredMessage:
        return _StoredMessage(
            message_id=f"msg-{next(self._ids)}",
            body=message.body,
            attributes=dict(message.attributes or {}),
        )

    async def _enqueue(self, queue: _MemoryQueue, stored: List[_StoredMessage]) -> None:
        async with queue.arrived:
            queue.pending.extend(stored)
            queue.arrived.notify_all()
