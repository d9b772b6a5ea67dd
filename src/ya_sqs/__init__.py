"""
Package: ya_sqs
Description: Async Amazon SQS client.

Push single or batched messages and consume a queue continuously with
automatic deletion after successful processing.

Example:
    >>> import ya_sqs
    >>> queue = ya_sqs.create_queue(name="jobs")
    >>> await queue.push({"job": 1})
"""

from .exceptions import (
    ConfigurationError,
    FormattingError,
    QueueClosedError,
    QueueError,
    ResolutionError,
)
from .formatters import Formatter, JsonFormatter
from .models import (
    BatchResult,
    OutgoingMessage,
    QueueEvent,
    QueueEventType,
    QueueOptions,
    ReceivedMessage,
)
from .sqs_queue import (
    ConsumerState,
    InMemoryTransport,
    Queue,
    SQSTransport,
    Transport,
    create_queue,
)

__version__ = "0.3.0"

__all__ = [
    "BatchResult",
    "ConfigurationError",
    "ConsumerState",
    "Formatter",
    "FormattingError",
    "InMemoryTransport",
    "JsonFormatter",
    "OutgoingMessage",
    "Queue",
    "QueueClosedError",
    "QueueError",
    "QueueEvent",
    "QueueEventType",
    "QueueOptions",
    "ReceivedMessage",
    "ResolutionError",
    "SQSTransport",
    "Transport",
    "create_queue",
]
