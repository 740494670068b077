"""Redis repository implementations."""

from lamer.persistence.repository.comment import RedisCommentRepository
from lamer.persistence.repository.news import RedisNewsRepository
from lamer.persistence.repository.rate_limit import RedisRateLimitRepository
from lamer.persistence.repository.user import RedisUserRepository
from lamer.persistence.repository.vote import RedisVoteRepository

__all__ = [
    "RedisUserRepository",
    "RedisNewsRepository",
    "RedisCommentRepository",
    "RedisVoteRepository",
    "RedisRateLimitRepository",
]
