"""
Module: batch_helpers.py
Description: Utility functions for batch publication.

Key Components:
- batch_entry_id(): Positional entry id for a batch call
- validate_batch_size(): Enforce the SQS per-call entry limit

Dependencies: typing
"""

from typing import Any, Sequence

# SendMessageBatch accepts at most 10 entries per call
MAX_BATCH_SIZE = 10


def batch_entry_id(index: int) -> str:
    """
    Build the id for the entry at ``index`` in submission order.

    Example:
        >>> batch_entry_id(2)
        'batch_2'
    """
    if index < 0:
        raise ValueError("index must be non-negative")
    return f"batch_{index}"


def validate_batch_size(items: Sequence[Any], max_size: int = MAX_BATCH_SIZE) -> None:
    """
    Validate that a batch doesn't exceed the maximum allowed size.

    Args:
        items: Items to validate
        max_size: Maximum allowed batch size

    Raises:
        ValueError: If batch size exceeds maximum

    Example:
        >>> validate_batch_size([1, 2, 3], 5)  # OK
        >>> validate_batch_size([1, 2, 3], 2)  # Raises ValueError
    """
    if isinstance(items, (str, bytes)):
        raise ValueError("items must be a sequence of values")
    if len(items) > max_size:
        raise ValueError(f"batch size cannot exceed {max_size} items")
