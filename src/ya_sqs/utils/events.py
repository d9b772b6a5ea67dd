"""
Module: events.py
Description: Per-queue event notifier.

Listeners are registered per event type and invoked synchronously, in
registration order, when an event is emitted. A failing listener is
logged and never interrupts the emitter or the remaining listeners.
"""

from collections import defaultdict
from typing import Callable, DefaultDict, List, Tuple, Union

from ..models.events import QueueEvent, QueueEventType
from .logger import get_logger

logger = get_logger(__name__)

Listener = Callable[[QueueEvent], None]


class EventNotifier:
    """
    Callback registry for queue lifecycle events.

    Example:
        >>> notifier = EventNotifier()
        >>> seen = []
        >>> notifier.on("closed", seen.append)
        >>> notifier.emit(QueueEvent.closed(None))
        >>> seen[0].type
        <QueueEventType.CLOSED: 'closed'>
    """

    def __init__(self) -> None:
        # (listener, once) pairs
        self._listeners: DefaultDict[QueueEventType, List[Tuple[Listener, bool]]] = defaultdict(list)

    def on(self, event_type: Union[QueueEventType, str], listener: Listener) -> None:
        """Register ``listener`` for every event of ``event_type``."""
        self._add(event_type, listener, once=False)

    def once(self, event_type: Union[QueueEventType, str], listener: Listener) -> None:
        """Register ``listener`` for the next event of ``event_type`` only."""
        self._add(event_type, listener, once=True)

    def off(self, event_type: Union[QueueEventType, str], listener: Listener) -> None:
        """Remove the first registration of ``listener``; unknown listeners are ignored."""
        entries = self._listeners[QueueEventType(event_type)]
        for i, (registered, _) in enumerate(entries):
            if registered == listener:
                del entries[i]
                return

    def listener_count(self, event_type: Union[QueueEventType, str]) -> int:
        return len(self._listeners[QueueEventType(event_type)])

    def emit(self, event: QueueEvent) -> None:
        """Deliver ``event`` to its listeners."""
        entries = self._listeners[event.type]

        if not entries:
            if event.type is QueueEventType.ERROR:
                logger.error(
                    "Unhandled queue error",
                    queue_url=event.queue_url,
                    message_id=event.message.message_id if event.message else None,
                    error=str(event.error),
                    error_type=type(event.error).__name__
                )
            return

        # Snapshot so listeners may register/unregister while being notified
        snapshot = list(entries)
        self._listeners[event.type] = [entry for entry in entries if not entry[1]]

        for listener, _ in snapshot:
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    "Queue event listener failed",
                    event_type=event.type.value,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e),
                    error_type=type(e).__name__
                )

    def _add(self, event_type: Union[QueueEventType, str], listener: Listener, once: bool) -> None:
        if not callable(listener):
            raise ValueError("listener must be callable")
        self._listeners[QueueEventType(event_type)].append((listener, once))
