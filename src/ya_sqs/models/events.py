"""
Module: events.py
Description: Lifecycle events emitted by a queue handle.

The five event names are part of the observable contract and are kept
verbatim as the enum values.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .message import ReceivedMessage


class QueueEventType(str, Enum):
    """Kinds of events a queue emits."""

    MESSAGE_PUSHED = "message pushed"
    MESSAGE_RECEIVED = "message received"
    MESSAGE_PROCESSED = "message processed"
    ERROR = "error"
    CLOSED = "closed"


class QueueEvent(BaseModel):
    """
    A single emitted event.

    Which payload field is populated depends on `type`:
    - MESSAGE_PUSHED: `value` is the original (unformatted) value
    - MESSAGE_RECEIVED / MESSAGE_PROCESSED: `message` is the raw envelope
    - ERROR: `error` is the failure, `message` is set for per-message failures
    - CLOSED: no payload
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    type: QueueEventType
    queue_url: Optional[str] = None
    value: Any = None
    message: Optional[ReceivedMessage] = None
    error: Optional[BaseException] = None

    @classmethod
    def pushed(cls, value: Any, queue_url: str) -> "QueueEvent":
        return cls(type=QueueEventType.MESSAGE_PUSHED, value=value, queue_url=queue_url)

    @classmethod
    def received(cls, message: ReceivedMessage, queue_url: str) -> "QueueEvent":
        return cls(type=QueueEventType.MESSAGE_RECEIVED, message=message, queue_url=queue_url)

    @classmethod
    def processed(cls, message: ReceivedMessage, queue_url: str) -> "QueueEvent":
        return cls(type=QueueEventType.MESSAGE_PROCESSED, message=message, queue_url=queue_url)

    @classmethod
    def failed(
        cls,
        error: BaseException,
        queue_url: Optional[str] = None,
        message: Optional[ReceivedMessage] = None,
    ) -> "QueueEvent":
        return cls(type=QueueEventType.ERROR, error=error, message=message, queue_url=queue_url)

    @classmethod
    def closed(cls, queue_url: Optional[str]) -> "QueueEvent":
        return cls(type=QueueEventType.CLOSED, queue_url=queue_url)
