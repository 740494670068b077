"""Domain value objects for Lamer News."""

from lamer.domain.value.identifiers import (
    ROOT_COMMENT_ID,
    CommentId,
    NewsId,
    UserId,
)
from lamer.domain.value.types import (
    TEXT_URL_SCHEME,
    CommentOp,
    NewsListing,
    UserFlag,
    Username,
    VoteType,
    text_url,
)

__all__ = [
    # Identifiers
    "UserId",
    "NewsId",
    "CommentId",
    "ROOT_COMMENT_ID",
    # Types
    "VoteType",
    "CommentOp",
    "UserFlag",
    "NewsListing",
    "Username",
    "TEXT_URL_SCHEME",
    "text_url",
]
