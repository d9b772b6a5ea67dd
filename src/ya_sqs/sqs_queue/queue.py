"""
Module: queue.py
Description: Queue handle tying publication and consumption together.

A Queue owns one resolver, publisher, consumer and event notifier, so
push/mpush and pull on the same handle share the same in-flight URL
resolution.

Key Components:
- Queue: Public handle (push, mpush, pull, start, close, events)
- create_queue(): Factory accepting a mapping or keyword options

Dependencies: pydantic, asyncio, formatters, transports
"""

import asyncio
from typing import Any, Mapping, Optional, Sequence, Set, Union

from pydantic import ValidationError

from ..exceptions import ConfigurationError
from ..formatters.json_formatter import JsonFormatter
from ..models.events import QueueEventType
from ..models.message import BatchResult
from ..models.options import QueueOptions
from ..utils.events import EventNotifier, Listener
from ..utils.logger import get_logger
from .client import SQSTransport
from .consumer import Consumer, ConsumerState, Handler
from .publisher import Publisher
from .resolver import QueueUrlResolver

logger = get_logger(__name__)


def _describe(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        message = item["msg"].removeprefix("Value error, ")
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {message}" if location else message)
    return "; ".join(problems)


class Queue:
    """
    Handle for one SQS queue.

    Exactly one of ``name`` (resolved lazily with CreateQueue) or ``url``
    must be given.

    Example:
        >>> queue = Queue(name="jobs", wait_time=10)
        >>> queue.on("message processed", lambda event: print(event.message.message_id))
        >>> await queue.push({"job": 1})
        >>> task = queue.start(handle_job)
        >>> queue.close()
        >>> await queue.wait_closed()
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        """
        Initialize queue handle.

        Args:
            options: Mapping of queue options (see QueueOptions)
            **kwargs: Options as keywords; override entries in ``options``

        Raises:
            ConfigurationError: If options are missing or invalid
        """
        try:
            self.options = QueueOptions(**{**dict(options or {}), **kwargs})
        except ValidationError as e:
            raise ConfigurationError(_describe(e)) from None

        self.formatter = self.options.formatter or JsonFormatter()
        self.client = self.options.client or SQSTransport(self.options.remote_config)
        self.notifier = EventNotifier()
        self._tasks: Set[asyncio.Task] = set()
        self.resolver = QueueUrlResolver(
            self.client,
            name=self.options.name,
            url=self.options.url,
            attributes=self.options.queue_attributes
        )
        self.publisher = Publisher(self.resolver, self.formatter, self.client, self.notifier)
        self.consumer = Consumer(
            self.resolver,
            self.formatter,
            self.client,
            self.notifier,
            wait_time=self.options.wait_time,
            max_messages=self.options.max_messages
        )

        logger.debug(
            "Queue created",
            queue_name=self.options.name,
            queue_url=self.options.url,
            wait_time=self.options.wait_time
        )

    @property
    def name(self) -> Optional[str]:
        return self.options.name

    @property
    def url(self) -> Optional[str]:
        """Queue URL once known, otherwise None."""
        return self.resolver.url

    @property
    def wait_time(self) -> int:
        return self.options.wait_time

    @property
    def state(self) -> ConsumerState:
        return self.consumer.state

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return self.consumer.closing

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on(self, event_type: Union[QueueEventType, str], listener: Listener) -> "Queue":
        self.notifier.on(event_type, listener)
        return self

    def once(self, event_type: Union[QueueEventType, str], listener: Listener) -> "Queue":
        self.notifier.once(event_type, listener)
        return self

    def off(self, event_type: Union[QueueEventType, str], listener: Listener) -> "Queue":
        self.notifier.off(event_type, listener)
        return self

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    async def resolve_url(self) -> str:
        """Return the queue URL, creating the queue on first use."""
        return await self.resolver.resolve()

    async def push(self, value: Any) -> str:
        """Format and send ``value``; returns the message id."""
        return await self.publisher.push(value)

    async def mpush(self, values: Sequence[Any]) -> BatchResult:
        """Format and send up to 10 values in one batch call."""
        return await self.publisher.mpush(values)

    async def pull(self, handler: Handler) -> None:
        """
        Consume messages with ``handler`` until close() is called.

        Returns when the loop stops: after `closed` when closed, or after
        an `error` event when the queue URL can't be resolved or a receive
        call fails (pull may then be called again).
        """
        await self.consumer.run(handler)

    def start(self, handler: Handler) -> asyncio.Task:
        """Run pull(handler) as a background task."""
        task = asyncio.ensure_future(self.pull(handler))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def close(self) -> None:
        """Stop consuming once the current cycle finishes."""
        self.consumer.close()

    async def wait_closed(self) -> None:
        """
        Wait until consumption has ended.

        Also joins runs scheduled by start() that have not begun yet.
        Returns immediately when nothing is consuming.
        """
        if self._tasks:
            await asyncio.wait(set(self._tasks))
        await self.consumer.wait_closed()

    async def __aenter__(self) -> "Queue":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
        await self.wait_closed()


def create_queue(options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Queue:
    """
    Create a new queue handle.

    Example:
        >>> queue = create_queue({"url": "https://sqs.us-east-1.amazonaws.com/123/jobs"})
        >>> queue = create_queue(name="jobs", remote_config={"region_name": "eu-west-1"})
    """
    return Queue(options, **kwargs)
