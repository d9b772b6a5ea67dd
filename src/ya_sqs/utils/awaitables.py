"""Helpers for callables that may answer synchronously or with an awaitable."""

import inspect
from typing import Any


async def resolve(result: Any) -> Any:
    """Await ``result`` when it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(result):
        return await result
    return result
