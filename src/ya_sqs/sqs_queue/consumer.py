"""
Module: consumer.py
Description: Consumer loop for continuous message processing.

Runs the receive -> parse -> handle -> delete cycle until the queue is
closed. Each envelope of a receive batch is processed concurrently and
the loop only polls again once all of them have finished. Per-message
failures are reported as `error` events and never stop the loop; a
failed resolution or receive call ends the current run.

States:
    IDLE -> RESOLVING -> POLLING <-> PROCESSING -> STOPPING -> STOPPED
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from ..exceptions import FormattingError, QueueClosedError, ResolutionError
from ..formatters.base import Formatter
from ..models.events import QueueEvent
from ..models.message import ReceivedMessage
from ..utils.awaitables import resolve
from ..utils.events import EventNotifier
from ..utils.logger import get_logger
from .resolver import QueueUrlResolver
from .transport import Transport

logger = get_logger(__name__)

Handler = Callable[[Any], Union[Any, Awaitable[Any]]]


class ConsumerState(str, Enum):
    """Lifecycle of a consumer."""

    IDLE = "idle"
    RESOLVING = "resolving"
    POLLING = "polling"
    PROCESSING = "processing"
    STOPPING = "stopping"
    STOPPED = "stopped"


class Consumer:
    """
    Pull-process-acknowledge loop for one queue.

    Attributes:
        wait_time: Long-poll wait in seconds per receive call
        max_messages: Maximum messages per receive call
        state: Current ConsumerState
    """

    def __init__(
        self,
        resolver: QueueUrlResolver,
        formatter: Formatter,
        client: Transport,
        notifier: EventNotifier,
        *,
        wait_time: int,
        max_messages: int
    ):
        self.resolver = resolver
        self.formatter = formatter
        self.client = client
        self.notifier = notifier
        self.wait_time = wait_time
        self.max_messages = max_messages
        self.state = ConsumerState.IDLE
        self._closing = False
        # Set whenever no run is in progress
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def closing(self) -> bool:
        """True once close() was requested; never reset."""
        return self._closing

    def close(self) -> None:
        """
        Ask the loop to stop after its current cycle.

        Neither an in-flight receive nor in-flight processing is
        interrupted. Repeated calls are no-ops.
        """
        if self._closing:
            return
        self._closing = True
        logger.info(
            "Consumer close requested",
            queue_url=self.resolver.url,
            state=self.state.value
        )

    async def wait_closed(self) -> None:
        """
        Wait until no run is in progress.

        Returns after `closed` when the loop stops normally, after the
        `error` event when a run ends on a resolution or receive failure,
        and immediately when no run is in progress.
        """
        await self._idle.wait()

    async def run(self, handler: Handler) -> None:
        """
        Consume messages until closed.

        ``handler`` receives each parsed value. Returning (or resolving an
        awaitable) marks the message as processed and it is deleted;
        raising leaves it on the queue for redelivery.

        Raises:
            QueueClosedError: If the consumer is already running or stopped
            ValueError: If handler is not callable
        """
        if not callable(handler):
            raise ValueError("handler must be callable")
        if self.state is ConsumerState.STOPPED:
            raise QueueClosedError("Queue consumer has already been closed")
        if self.state is not ConsumerState.IDLE:
            raise QueueClosedError("Queue consumer is already running")

        self.state = ConsumerState.RESOLVING
        self._idle.clear()
        try:
            await self._run(handler)
        finally:
            if self.state is not ConsumerState.STOPPED:
                self.state = ConsumerState.IDLE
            self._idle.set()

    async def _run(self, handler: Handler) -> None:
        try:
            queue_url = await self.resolver.resolve()
        except ResolutionError as e:
            self.notifier.emit(QueueEvent.failed(e))
            return

        logger.info(
            "Consumer started",
            queue_url=queue_url,
            wait_time=self.wait_time,
            max_messages=self.max_messages
        )

        while True:
            self.state = ConsumerState.POLLING
            try:
                messages = await self.client.receive_messages(
                    queue_url,
                    self.max_messages,
                    self.wait_time
                )
            except Exception as e:
                logger.error(
                    "Receive failed, consumer stopped",
                    queue_url=queue_url,
                    error=str(e),
                    error_type=type(e).__name__
                )
                self.notifier.emit(QueueEvent.failed(e, queue_url))
                return

            if messages:
                self.state = ConsumerState.PROCESSING
                await asyncio.gather(*(
                    self._process(queue_url, handler, message) for message in messages
                ))

            if self._closing:
                break

        self.state = ConsumerState.STOPPING
        logger.info("Consumer stopped", queue_url=queue_url)
        self.state = ConsumerState.STOPPED
        self.notifier.emit(QueueEvent.closed(queue_url))

    async def _process(self, queue_url: str, handler: Handler, message: ReceivedMessage) -> None:
        try:
            error = await self._handle(queue_url, handler, message)
            if error is None:
                error = await self._delete(queue_url, message)
            if error is not None:
                self.notifier.emit(QueueEvent.failed(error, queue_url, message))
        finally:
            self.notifier.emit(QueueEvent.processed(message, queue_url))

    async def _handle(
        self,
        queue_url: str,
        handler: Handler,
        message: ReceivedMessage
    ) -> Optional[Exception]:
        try:
            value = await resolve(self.formatter.parse(message))
        except Exception as e:
            logger.warning(
                "Message parse failed",
                queue_url=queue_url,
                message_id=message.message_id,
                error=str(e)
            )
            error = FormattingError(f"Unable to parse message {message.message_id}: {e}")
            error.__cause__ = e
            return error

        self.notifier.emit(QueueEvent.received(message, queue_url))

        try:
            await resolve(handler(value))
        except Exception as e:
            logger.warning(
                "Message handler failed",
                queue_url=queue_url,
                message_id=message.message_id,
                receive_count=message.receive_count,
                error=str(e),
                error_type=type(e).__name__
            )
            return e

        return None

    async def _delete(self, queue_url: str, message: ReceivedMessage) -> Optional[Exception]:
        try:
            await self.client.delete_message(queue_url, message.receipt_handle)
        except Exception as e:
            logger.warning(
                "Message delete failed",
                queue_url=queue_url,
                message_id=message.message_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return e

        logger.debug("Message processed", queue_url=queue_url, message_id=message.message_id)
        return None
