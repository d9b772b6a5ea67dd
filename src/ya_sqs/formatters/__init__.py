"""
Package: formatters
Description: Pluggable message body encoding.

Provides the Formatter protocol and the default JSON implementation.
"""

from .base import Formatter
from .json_formatter import JsonFormatter

__all__ = ["Formatter", "JsonFormatter"]
