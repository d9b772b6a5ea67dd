"""
Module: exceptions.py
Description: Error taxonomy for queue operations.

Call-level failures (construction, resolution, push/mpush) are raised to
the direct caller. Per-message failures inside the consumer loop are
reported through `error` events instead and never escape the loop.
"""


class QueueError(Exception):
    """Base class for all ya-sqs errors."""


class ConfigurationError(QueueError, ValueError):
    """Queue options are missing or invalid."""


class ResolutionError(QueueError):
    """The queue URL could not be created or looked up."""

    def __init__(self, name: str, cause: BaseException):
        self.name = name
        self.cause = cause
        super().__init__(f"Unable to resolve queue '{name}': {cause}")


class FormattingError(QueueError, ValueError):
    """A value could not be encoded, or a message body could not be decoded."""


class QueueClosedError(QueueError):
    """The consumer is already running or has already stopped."""
