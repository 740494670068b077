"""Domain model entities for Lamer News."""

from lamer.domain.model.comment import Comment
from lamer.domain.model.news import News
from lamer.domain.model.user import User
from lamer.domain.model.vote import Vote

__all__ = [
    "User",
    "News",
    "Comment",
    "Vote",
]
