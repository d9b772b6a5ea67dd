"""
Module: base.py
Description: Formatter capability consumed by the queue.

A formatter converts an application value to an outgoing envelope and a
received envelope back to a value. Either method may return an
awaitable; the queue awaits it.
"""

from typing import Any, Awaitable, Protocol, Union, runtime_checkable

from ..models.message import OutgoingMessage, ReceivedMessage


@runtime_checkable
class Formatter(Protocol):
    """Encode values for publication and decode received messages."""

    def format(self, value: Any) -> Union[OutgoingMessage, Awaitable[OutgoingMessage]]:
        """Encode ``value`` into an outgoing envelope."""

    def parse(self, message: ReceivedMessage) -> Union[Any, Awaitable[Any]]:
        """Decode the body of ``message``."""
