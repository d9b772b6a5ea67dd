"""
Module: json_formatter.py
Description: Default JSON formatter.

Encodes values with strict json.dumps (no default=str fallback) so
circular or non-serialisable values fail before anything is sent.
"""

import json
from typing import Any

from ..models.message import OutgoingMessage, ReceivedMessage


class JsonFormatter:
    """
    Format values as JSON message bodies.

    Example:
        >>> formatter = JsonFormatter()
        >>> formatter.format({"job": 1}).body
        '{"job": 1}'
    """

    def __init__(self, *, sort_keys: bool = False, allow_nan: bool = False):
        self.sort_keys = sort_keys
        self.allow_nan = allow_nan

    def format(self, value: Any) -> OutgoingMessage:
        """Serialize ``value``; raises ValueError/TypeError when it can't be encoded."""
        body = json.dumps(value, sort_keys=self.sort_keys, allow_nan=self.allow_nan)
        return OutgoingMessage(body=body)

    def parse(self, message: ReceivedMessage) -> Any:
        """Deserialize the message body; raises json.JSONDecodeError on malformed input."""
        return json.loads(message.body)
