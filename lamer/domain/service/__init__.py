"""Domain services."""

from .base import Service
from .comment_service import (
    CommentNode,
    CommentOperation,
    CommentService,
    CommentThread,
)
from .news_service import NewsService
from .password_service import PasswordService
from .ranking_service import RankingService
from .rate_limit_service import RateLimitService
from .user_service import UserCounters, UserService
from .vote_service import VoteService

__all__ = [
    "CommentNode",
    "CommentOperation",
    "CommentService",
    "CommentThread",
    "NewsService",
    "PasswordService",
    "RankingService",
    "RateLimitService",
    "Service",
    "UserCounters",
    "UserService",
    "VoteService",
]
