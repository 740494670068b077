"""Domain value objects for Lamer News.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from lamer.domain.value.common import RootValueObject

TEXT_URL_SCHEME = "text://"


class VoteType(str, Enum):
    """Direction of a vote on a news item or comment."""

    UP = "up"
    DOWN = "down"


class CommentOp(str, Enum):
    """Operation performed by a comment write."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class UserFlag(str, Enum):
    """Capability letters stored in the user's flags string."""

    ADMIN = "a"


class NewsListing(str, Enum):
    """Global news index a listing reads from."""

    TOP = "top"
    LATEST = "latest"


class Username(RootValueObject[str]):
    """Registered username.

    Must start with a letter and contain only letters, digits, '-' and '_'.
    Uniqueness is case-insensitive and enforced by the store.
    """

    @field_validator("root")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username format."""
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9_-]+$", v):
            raise ValueError(
                "Username must start with a letter and contain only "
                "letters, digits, '-' and '_'"
            )
        if len(v) > 20:
            raise ValueError("Username must be at most 20 characters")
        return v

    @property
    def key(self) -> str:
        """Case-folded form used for the unique index."""
        return self.root.lower()


def text_url(text: str, max_length: int) -> str:
    """Build the synthetic URL that stores the body of a text post."""
    return TEXT_URL_SCHEME + text[:max_length]
