"""
Module: transport.py
Description: Transport capability consumed by the queue core.

Any object implementing these coroutines can be passed as the `client`
option; SQSTransport and InMemoryTransport are the bundled ones.
"""

from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from ..models.message import BatchEntry, BatchResult, OutgoingMessage, ReceivedMessage


@runtime_checkable
class Transport(Protocol):
    """Remote queue operations."""

    async def create_queue(self, name: str, attributes: Optional[Dict[str, str]] = None) -> str:
        """Create (or look up) the queue called ``name`` and return its URL."""

    async def send_message(self, queue_url: str, message: OutgoingMessage) -> str:
        """Send one message and return its message id."""

    async def send_message_batch(self, queue_url: str, entries: Sequence[BatchEntry]) -> BatchResult:
        """Send entries in one call and return the per-entry outcome."""

    async def receive_messages(
        self,
        queue_url: str,
        max_messages: int,
        wait_seconds: int
    ) -> List[ReceivedMessage]:
        """Long-poll for up to ``max_messages``; an empty list means nothing arrived."""

    async def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """Acknowledge a received message."""
