"""Redis implementation of RateLimit repository."""

from typing import Sequence

from redis.asyncio import Redis

from lamer.domain.repository.rate_limit import RateLimitRepository
from lamer.persistence import keys
from lamer.persistence.error import translate_store_errors


class RedisRateLimitRepository(RateLimitRepository):
    """Throttle markers as expiring ``limit:<tags>`` keys."""

    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    @translate_store_errors
    async def acquire(self, tags: Sequence[str], ttl: int) -> bool:
        """SET NX EX, so check-and-install is one atomic step."""
        acquired = await self.redis.set(keys.rate_limit(tags), 1, nx=True, ex=ttl)
        return bool(acquired)

    @translate_store_errors
    async def ttl(self, tags: Sequence[str]) -> int:
        return int(await self.redis.ttl(keys.rate_limit(tags)))
