"""
Module: resolver.py
Description: Lazy, memoised queue URL resolution.

The first caller that finds no URL and no resolution in flight starts a
single CreateQueue call; concurrent callers await that same task. A
successful result is kept for the lifetime of the handle. A failure
clears the in-flight task so a later call can retry.
"""

import asyncio
from typing import Dict, Optional

from ..exceptions import ResolutionError
from ..utils.logger import get_logger
from .transport import Transport

logger = get_logger(__name__)


class QueueUrlResolver:
    """
    Resolve and cache the URL of one queue.

    Attributes:
        name: Queue name used for CreateQueue (None when a URL was given)
        url: Resolved URL, immutable once set
    """

    def __init__(
        self,
        client: Transport,
        *,
        name: Optional[str] = None,
        url: Optional[str] = None,
        attributes: Optional[Dict[str, str]] = None
    ):
        if not name and not url:
            raise ValueError("name or url is required")

        self.client = client
        self.name = name
        self.attributes = dict(attributes or {})
        self._url = url
        self._pending: Optional[asyncio.Task] = None

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def resolving(self) -> bool:
        """True while a CreateQueue call is in flight."""
        return self._pending is not None

    async def resolve(self) -> str:
        """
        Return the queue URL, creating or looking up the queue on first use.

        Raises:
            ResolutionError: If the transport call fails
        """
        if self._url is not None:
            return self._url

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._create())

        # Shield so a cancelled waiter doesn't cancel the shared call
        return await asyncio.shield(self._pending)

    async def _create(self) -> str:
        logger.debug("Resolving queue URL", queue_name=self.name)
        try:
            url = await self.client.create_queue(self.name, self.attributes or None)
        except Exception as e:
            logger.error(
                "Queue URL resolution failed",
                queue_name=self.name,
                error=str(e),
                error_type=type(e).__name__
            )
            raise ResolutionError(self.name, e) from e
        else:
            self._url = url
            logger.info("Queue URL resolved", queue_name=self.name, queue_url=url)
            return url
        finally:
            self._pending = None
