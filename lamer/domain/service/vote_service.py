"""Vote domain service."""

from typing import Union

import logfire

from lamer.config import KarmaSettings
from lamer.domain.error import (
    ContentDeletedError,
    DuplicateVoteError,
    InsufficientKarmaError,
    NotFoundError,
    ValidationError,
)
from lamer.domain.model import Vote
from lamer.domain.repository import NewsRepository, VoteRepository
from lamer.domain.value import NewsId, UserId, VoteType

from .base import Service
from .ranking_service import RankingService
from .user_service import UserService


def parse_vote_type(vote_type: Union[VoteType, str]) -> VoteType:
    """Validate a vote direction.

    Raises:
        ValidationError: If the value is neither "up" nor "down"
    """
    try:
        return VoteType(vote_type)
    except ValueError:
        raise ValidationError(f"Invalid vote type: {vote_type!r}")


class VoteService(Service):
    """Domain service for votes on news items."""

    def __init__(
        self,
        vote_repository: VoteRepository,
        news_repository: NewsRepository,
        user_service: UserService,
        ranking_service: RankingService,
        karma_settings: KarmaSettings,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote repository
            news_repository: News repository
            user_service: User domain service
            ranking_service: Ranking domain service
            karma_settings: Karma costs and thresholds of voting
        """
        self.vote_repository = vote_repository
        self.news_repository = news_repository
        self.user_service = user_service
        self.ranking_service = ranking_service
        self.karma_settings = karma_settings

    async def vote_news(
        self,
        news_id: NewsId,
        user_id: UserId,
        vote_type: Union[VoteType, str],
    ) -> float:
        """Cast a vote on a news item.

        A user holds at most one vote per item and cannot change it. The
        vote is recorded with a conditional add on the vote set, then the
        score and rank are recomputed from the vote sets and stored.

        Voting on somebody else's news requires a minimum karma, costs the
        voter karma and, for upvotes, transfers karma to the author.

        Args:
            news_id: News item ID
            user_id: Voting user ID
            vote_type: "up" or "down"

        Returns:
            The new rank of the news item

        Raises:
            ValidationError: If the vote type is invalid
            NotFoundError: If the user or the news item does not exist
            ContentDeletedError: If the news item was deleted
            DuplicateVoteError: If the user already voted this item
            InsufficientKarmaError: If the user lacks the karma to vote
        """
        vote_type = parse_vote_type(vote_type)

        with logfire.span(
            "vote_service.vote_news",
            news_id=news_id,
            user_id=user_id,
            type=vote_type.value,
        ):
            user = await self.user_service.get_user_by_id(user_id)
            if not user:
                raise NotFoundError("User", str(user_id))

            news = await self.news_repository.find_by_id(news_id)
            if not news:
                raise NotFoundError("News", str(news_id))
            if news.deleted:
                raise ContentDeletedError("News", str(news_id))

            if await self.vote_repository.find_vote(news_id, user.id):
                logfire.warn("Duplicate vote attempt", news_id=news_id, user_id=user.id)
                raise DuplicateVoteError(f"User {user.id} already voted news {news_id}")

            own_news = news.user_id == user.id
            if not own_news:
                self._check_karma(user.karma, vote_type)

            vote = Vote(
                news_id=news_id,
                user_id=user.id,
                type=vote_type,
                created_at=self.now(),
            )
            if not await self.vote_repository.add(vote):
                logfire.warn("Concurrent duplicate vote", news_id=news_id, user_id=user.id)
                raise DuplicateVoteError(f"User {user.id} already voted news {news_id}")

            news = await self.ranking_service.update_news_score(news)

            if not own_news:
                await self._transfer_karma(user.id, news.user_id, vote_type)

            logfire.info(
                "News voted",
                news_id=news_id,
                user_id=user.id,
                type=vote_type.value,
                score=news.score,
                rank=news.rank,
            )
            return news.rank

    def _check_karma(self, karma: int, vote_type: VoteType) -> None:
        if vote_type == VoteType.UP:
            required = self.karma_settings.news_upvote_min_karma
        else:
            required = self.karma_settings.news_downvote_min_karma

        if karma < required:
            raise InsufficientKarmaError(
                f"You need {required} karma to {vote_type.value}vote news"
            )

    async def _transfer_karma(
        self, voter_id: UserId, author_id: UserId, vote_type: VoteType
    ) -> None:
        if vote_type == VoteType.UP:
            await self.user_service.increment_user_karma_by(
                voter_id, -self.karma_settings.news_upvote_karma_cost
            )
            await self.user_service.increment_user_karma_by(
                author_id, self.karma_settings.news_upvote_karma_transfered
            )
        else:
            await self.user_service.increment_user_karma_by(
                voter_id, -self.karma_settings.news_downvote_karma_cost
            )
