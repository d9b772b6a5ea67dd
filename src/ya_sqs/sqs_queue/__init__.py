"""
Package: sqs_queue
Description: SQS message queue operations.

Provides the Queue handle (publication and the consumer loop) together
with the transports it runs on.
"""

from .client import SQSTransport
from .consumer import Consumer, ConsumerState
from .memory import InMemoryTransport
from .publisher import Publisher
from .queue import Queue, create_queue
from .resolver import QueueUrlResolver
from .transport import Transport

__all__ = [
    "Consumer",
    "ConsumerState",
    "InMemoryTransport",
    "Publisher",
    "Queue",
    "QueueUrlResolver",
    "SQSTransport",
    "Transport",
    "create_queue",
]
