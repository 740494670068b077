"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from redis.asyncio import Redis

from lamer.config import Settings
from lamer.domain.repository import (
    CommentRepository,
    NewsRepository,
    RateLimitRepository,
    UserRepository,
    VoteRepository,
)
from lamer.persistence.database import create_redis_client
from lamer.persistence.repository import (
    RedisCommentRepository,
    RedisNewsRepository,
    RedisRateLimitRepository,
    RedisUserRepository,
    RedisVoteRepository,
)
from lamer.util.di.base import ProviderBase
from lamer.util.observability import instrument_redis


class RepositoryProvider(ProviderBase):
    """Redis repositories - concrete, built on whichever client is provided."""

    scope = Scope.REQUEST

    @provide
    def get_user_repository(self, redis: Redis) -> UserRepository:
        """Provide User repository."""
        return RedisUserRepository(redis)

    @provide
    def get_news_repository(self, redis: Redis) -> NewsRepository:
        """Provide News repository."""
        return RedisNewsRepository(redis)

    @provide
    def get_vote_repository(self, redis: Redis) -> VoteRepository:
        """Provide Vote repository."""
        return RedisVoteRepository(redis)

    @provide
    def get_comment_repository(self, redis: Redis) -> CommentRepository:
        """Provide Comment repository."""
        return RedisCommentRepository(redis)

    @provide
    def get_rate_limit_repository(self, redis: Redis) -> RateLimitRepository:
        """Provide RateLimit repository."""
        return RedisRateLimitRepository(redis)


class PersistenceProvider(ProviderBase):
    """Persistence component base: provides the Redis client."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using Redis."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_redis(self, settings: Settings) -> AsyncIterator[Redis]:
        """Provide the Redis client shared by every request.

        The connection pool is closed when the container closes.
        """
        redis = create_redis_client(settings)
        # Instrument Redis for observability
        instrument_redis()
        yield redis
        await redis.aclose()
        logfire.info("Redis connection pool closed")
