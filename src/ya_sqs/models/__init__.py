"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains all data models used by ya-sqs:
- QueueOptions: Validated queue construction options
- OutgoingMessage / ReceivedMessage: Message envelopes
- BatchEntry / BatchResult: Batch publication models
- QueueEvent / QueueEventType: Lifecycle events

All models are exported here for convenient importing.
"""

from .events import QueueEvent, QueueEventType
from .message import (
    BatchEntry,
    BatchEntryFailure,
    BatchResult,
    OutgoingMessage,
    ReceivedMessage,
)
from .options import QueueOptions

__all__ = [
    "BatchEntry",
    "BatchEntryFailure",
    "BatchResult",
    "OutgoingMessage",
    "QueueEvent",
    "QueueEventType",
    "QueueOptions",
    "ReceivedMessage",
]
