"""
Module: utils
Description: Package initialization for utility functions.

This package contains shared helpers used throughout ya-sqs:
- logger: Structured logging configuration and helpers
- events: Per-queue event notifier
- batch_helpers: Batch id and size helpers
- awaitables: Sync/async result normalisation
"""

__all__ = []
