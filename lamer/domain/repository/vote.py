"""Vote repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from lamer.domain.model.vote import Vote
from lamer.domain.value import NewsId, UserId, VoteType


class VoteRepository(ABC):
    """Repository for news votes.

    Votes live in two ordered sets per news item (up-voters and
    down-voters), scored by the time the vote was cast.
    """

    @abstractmethod
    async def find_vote(self, news_id: NewsId, user_id: UserId) -> Optional[VoteType]:
        """Find a user's vote on a news item.

        Both sets are checked, so a user can never appear to hold two votes.

        Args:
            news_id: ID of the news item
            user_id: The user's ID

        Returns:
            The vote type if the user voted, None otherwise
        """
        pass

    @abstractmethod
    async def find_votes(
        self, news_ids: Sequence[NewsId], user_id: UserId
    ) -> dict[NewsId, Optional[VoteType]]:
        """Find a user's votes on multiple news items (batch query).

        Args:
            news_ids: IDs of the news items
            user_id: The user's ID

        Returns:
            Mapping of every requested news id to the vote type or None
        """
        pass

    @abstractmethod
    async def add(self, vote: Vote) -> bool:
        """Record a vote.

        The check of both vote sets and the write happen atomically, so a
        user ends up with at most one vote per news item even when an up
        and a down vote race. On success the news item's up/down
        counter is incremented and, for upvotes, the news is added to the
        voter's saved list.

        Args:
            vote: The vote to record

        Returns:
            True if the vote was recorded, False if it already existed
        """
        pass

    @abstractmethod
    async def count(self, news_id: NewsId) -> tuple[int, int]:
        """Count the up-voters and down-voters of a news item.

        Returns:
            (upvotes, downvotes) read from the vote sets
        """
        pass
