"""News repository interface."""

from abc import ABC, abstractmethod
from typing import List, Mapping, Optional, Sequence

from lamer.domain.model.news import News
from lamer.domain.value import NewsId, UserId


class NewsRepository(ABC):
    """Repository for News entity and its derived indexes.

    The global indexes (chronological and top) and the per-user posted and
    saved lists are maintained here next to the news records they derive
    from.
    """

    @abstractmethod
    async def next_id(self) -> NewsId:
        """Atomically allocate the next news id."""
        pass

    @abstractmethod
    async def find_by_id(self, news_id: NewsId) -> Optional[News]:
        """Find a news item by ID.

        Args:
            news_id: The news item's unique identifier

        Returns:
            The news item if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_many(self, news_ids: Sequence[NewsId]) -> List[News]:
        """Load several news items in one round trip.

        Missing ids are skipped; the order of ``news_ids`` is kept.
        """
        pass

    @abstractmethod
    async def save(self, news: News) -> News:
        """Write the full news record."""
        pass

    @abstractmethod
    async def update_content(self, news_id: NewsId, title: str, url: str) -> None:
        """Overwrite title and URL of an existing news item."""
        pass

    @abstractmethod
    async def mark_deleted(self, news_id: NewsId) -> None:
        """Flag the news as deleted and drop it from the global indexes."""
        pass

    @abstractmethod
    async def set_score_and_rank(
        self, news_id: NewsId, score: float, rank: float
    ) -> None:
        """Store a freshly computed score and rank, updating the top index."""
        pass

    @abstractmethod
    async def update_ranks(self, ranks: Mapping[NewsId, float]) -> None:
        """Store several reconciled ranks and update the top index."""
        pass

    @abstractmethod
    async def increment_comments(self, news_id: NewsId, amount: int) -> int:
        """Adjust the comment counter.

        Returns:
            The counter after the adjustment
        """
        pass

    @abstractmethod
    async def add_to_indexes(self, news: News) -> None:
        """Index a new item into posted, chronological and top views."""
        pass

    @abstractmethod
    async def find_id_by_url(self, url: str) -> Optional[NewsId]:
        """Find the news item holding the repost lock for ``url``."""
        pass

    @abstractmethod
    async def lock_url(self, url: str, news_id: NewsId, ttl: int) -> bool:
        """Take the repost lock for ``url`` if nobody holds it.

        Returns:
            True if the lock was taken for ``news_id``
        """
        pass

    @abstractmethod
    async def release_url(self, url: str) -> None:
        """Drop the repost lock for ``url``."""
        pass

    @abstractmethod
    async def top_ids(self, start: int, count: int) -> List[NewsId]:
        """Ids from the top index, highest cached rank first."""
        pass

    @abstractmethod
    async def latest_ids(self, start: int, count: int) -> List[NewsId]:
        """Ids from the chronological index, newest first."""
        pass

    @abstractmethod
    async def saved_ids(self, user_id: UserId, start: int, count: int) -> List[NewsId]:
        """Ids the user saved (upvoted), most recent first."""
        pass

    @abstractmethod
    async def count_saved(self, user_id: UserId) -> int:
        pass

    @abstractmethod
    async def posted_ids(
        self, user_id: UserId, start: int, count: int
    ) -> List[NewsId]:
        """Ids the user submitted, most recent first."""
        pass

    @abstractmethod
    async def count_posted(self, user_id: UserId) -> int:
        pass

    @abstractmethod
    async def mark_submitted(self, user_id: UserId, ttl: int) -> None:
        """Start the user's submission cool-down."""
        pass

    @abstractmethod
    async def submission_ttl(self, user_id: UserId) -> int:
        """Seconds left on the user's cool-down (<= 0 when none)."""
        pass
