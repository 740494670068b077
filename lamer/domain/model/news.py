"""News aggregate root.

A news item is either a link (http/https URL) or a text post. Text posts
have no URL of their own: their body is stored in a synthetic ``text://``
URL so both kinds share one record layout.
"""

from typing import Optional
from urllib.parse import urlparse

from lamer.domain.model.common import DomainModel
from lamer.domain.value import TEXT_URL_SCHEME, NewsId, UserId, VoteType


class News(DomainModel):
    """News item.

    ``score`` is derived from the vote sets and ``rank`` from score and age.
    The stored rank is a cache that may lag behind the real value; read
    paths reconcile it.

    ``username`` and ``voted`` are read-time annotations, not persisted.
    """

    id: NewsId
    title: str
    url: str
    user_id: UserId
    created_at: int  # unix seconds
    score: float = 0.0
    rank: float = 0.0
    up: int = 0
    down: int = 0
    comments: int = 0
    deleted: bool = False

    username: Optional[str] = None
    voted: Optional[VoteType] = None

    @property
    def is_text_post(self) -> bool:
        return self.url.startswith(TEXT_URL_SCHEME)

    @property
    def text(self) -> Optional[str]:
        """Body of a text post, None for link posts."""
        if not self.is_text_post:
            return None
        return self.url[len(TEXT_URL_SCHEME) :]

    @property
    def domain(self) -> Optional[str]:
        """Host part of a link post's URL, None for text posts."""
        if self.is_text_post:
            return None
        return urlparse(self.url).hostname
