"""Comment entity.

Comments of one news item live together in a single thread record. Each
comment points at its parent by id (-1 for top-level comments); there is
no materialized child list. Deleting a comment leaves a tombstone so that
replies keep a valid parent.
"""

from typing import Optional

from pydantic import Field

from lamer.domain.model.common import DomainModel
from lamer.domain.model.user import User
from lamer.domain.value import ROOT_COMMENT_ID, CommentId, NewsId, UserId


class Comment(DomainModel):
    """Comment entity."""

    id: CommentId
    news_id: NewsId
    parent_id: CommentId = ROOT_COMMENT_ID
    user_id: UserId
    body: str
    score: int = 0
    created_at: int  # unix seconds
    deleted: bool = False
    up: list[UserId] = Field(default_factory=list)
    down: list[UserId] = Field(default_factory=list)

    # Read-time annotation, resolved once per author per thread load
    user: Optional[User] = None

    @property
    def is_root(self) -> bool:
        return self.parent_id == ROOT_COMMENT_ID

    @property
    def ref(self) -> str:
        """Identifier used by the per-user comment indexes."""
        return f"{self.news_id}-{self.id}"
