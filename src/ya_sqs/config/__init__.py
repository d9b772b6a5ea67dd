"""
Package: config
Description: Environment-driven configuration for ya-sqs.
"""

from .settings import QueueSettings, settings

__all__ = ["QueueSettings", "settings"]
