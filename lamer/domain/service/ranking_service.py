"""Scoring and ranking domain service."""

import math
from typing import Optional, Sequence

import logfire

from lamer.config import RankingSettings
from lamer.domain.model import News
from lamer.domain.repository import NewsRepository, VoteRepository
from lamer.domain.value import NewsId

from .base import Service


class RankingService(Service):
    """Computes news scores and age-decayed ranks.

    Score is derived from the vote sets themselves, never from the cached
    up/down counters. Rank is a function of the stored score and the age
    of the item; the value stored in ``news.top`` is a cache reconciled
    lazily by read paths.
    """

    def __init__(
        self,
        news_repository: NewsRepository,
        vote_repository: VoteRepository,
        ranking_settings: RankingSettings,
    ) -> None:
        """Initialize ranking service.

        Args:
            news_repository: News repository
            vote_repository: Vote repository
            ranking_settings: Score and rank parameters
        """
        self.news_repository = news_repository
        self.vote_repository = vote_repository
        self.ranking_settings = ranking_settings

    async def compute_news_score(self, news: News) -> float:
        """Compute the score of a news item from its vote sets.

        Linear in (up - down), plus a logarithmic bonus once the total
        number of votes exceeds ``news_score_log_start``.
        """
        upvotes, downvotes = await self.vote_repository.count(news.id)
        score = float(upvotes - downvotes)
        votes = upvotes + downvotes

        log_start = self.ranking_settings.news_score_log_start
        if votes > log_start:
            score += (
                math.log(votes - log_start)
                * self.ranking_settings.news_score_log_booster
            )
        return score

    def compute_news_rank(self, news: News, now: Optional[int] = None) -> float:
        """Compute the age-decayed rank of a news item.

        For a fixed positive score the rank strictly decreases as time
        passes; a zero score always ranks 0.
        """
        if now is None:
            now = self.now()
        age = now - news.created_at + self.ranking_settings.news_age_padding
        return (news.score * 1000) / (age * self.ranking_settings.rank_aging_factor)

    async def update_news_score(self, news: News) -> News:
        """Recompute score and rank and store both.

        Returns:
            The news item with fresh score and rank
        """
        with logfire.span("ranking_service.update_news_score", news_id=news.id):
            score = await self.compute_news_score(news)
            scored = news.model_copy(update={"score": score})
            rank = self.compute_news_rank(scored)
            await self.news_repository.set_score_and_rank(news.id, score, rank)
            return scored.model_copy(update={"rank": rank})

    async def refresh_ranks(
        self, items: Sequence[News], now: Optional[int] = None
    ) -> list[News]:
        """Reconcile cached ranks with their real values.

        Ranks that drifted by more than ``rank_update_epsilon`` are written
        back in one batch. Deleted news keeps its rank and is never put back
        into the top index.

        Returns:
            The items with reconciled ranks, in input order
        """
        if now is None:
            now = self.now()

        stale: dict[NewsId, float] = {}
        result = []
        for news in items:
            if not news.deleted:
                real_rank = self.compute_news_rank(news, now)
                if abs(real_rank - news.rank) > self.ranking_settings.rank_update_epsilon:
                    stale[news.id] = real_rank
                    news = news.model_copy(update={"rank": real_rank})
            result.append(news)

        if stale:
            await self.news_repository.update_ranks(stale)
            logfire.debug("Ranks refreshed", count=len(stale))
        return result

    async def refresh_rank_if_stale(
        self, news: News, now: Optional[int] = None
    ) -> News:
        """Single item form of refresh_ranks."""
        refreshed = await self.refresh_ranks([news], now)
        return refreshed[0]
