"""Rate limiting domain service."""

from typing import Sequence

import logfire

from lamer.domain.repository import RateLimitRepository

from .base import Service


class RateLimitService(Service):
    """Tag based throttle backed by self-expiring markers."""

    def __init__(self, rate_limit_repository: RateLimitRepository) -> None:
        self.rate_limit_repository = rate_limit_repository

    async def rate_limited(self, delay: int, tags: Sequence[str]) -> bool:
        """Check and arm a throttle.

        The first call for a tag combination installs a marker that lives
        for ``delay`` seconds and is allowed; later calls are blocked until
        the marker expires.

        Args:
            delay: Throttle window in seconds
            tags: Discriminating tags, e.g. action name and client id

        Returns:
            True if the action is currently blocked
        """
        if await self.rate_limit_repository.acquire(tags, delay):
            return False

        logfire.info("Rate limited", tags=list(tags))
        return True

    async def retry_after(self, tags: Sequence[str]) -> int:
        """Seconds until a blocked tag combination is allowed again."""
        return max(await self.rate_limit_repository.ttl(tags), 0)
