"""Rate limit repository interface."""

from abc import ABC, abstractmethod
from typing import Sequence


class RateLimitRepository(ABC):
    """Repository for self-expiring throttle markers."""

    @abstractmethod
    async def acquire(self, tags: Sequence[str], ttl: int) -> bool:
        """Install the marker for a tag combination if it is absent.

        Args:
            tags: Discriminating tags, e.g. action name and user id
            ttl: Seconds until the marker expires

        Returns:
            True if the marker was installed, False if one was active
        """
        pass

    @abstractmethod
    async def ttl(self, tags: Sequence[str]) -> int:
        """Seconds left on the marker (<= 0 when none is active)."""
        pass
