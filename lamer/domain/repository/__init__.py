"""Repository interfaces for the Lamer News domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from lamer.domain.repository.comment import CommentRepository
from lamer.domain.repository.news import NewsRepository
from lamer.domain.repository.rate_limit import RateLimitRepository
from lamer.domain.repository.user import UserRepository
from lamer.domain.repository.vote import VoteRepository

__all__ = [
    "UserRepository",
    "NewsRepository",
    "CommentRepository",
    "VoteRepository",
    "RateLimitRepository",
]
