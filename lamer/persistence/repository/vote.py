"""Redis implementation of Vote repository."""

from typing import Optional, Sequence

import logfire
from redis.asyncio import Redis
from redis.asyncio.client import Pipeline

from lamer.domain.model import Vote
from lamer.domain.repository.vote import VoteRepository
from lamer.domain.value import NewsId, UserId, VoteType
from lamer.persistence import keys
from lamer.persistence.error import translate_store_errors


def _vote_type(up_score: Optional[float], down_score: Optional[float]) -> Optional[VoteType]:
    if up_score is not None:
        return VoteType.UP
    if down_score is not None:
        return VoteType.DOWN
    return None


class RedisVoteRepository(VoteRepository):
    """Redis implementation of VoteRepository."""

    def __init__(self, redis: Redis) -> None:
        """Initialize repository with a Redis client.

        Args:
            redis: Async Redis client (responses decoded to str)
        """
        self.redis = redis

    @translate_store_errors
    async def find_vote(self, news_id: NewsId, user_id: UserId) -> Optional[VoteType]:
        """Check both vote sets for the user."""
        async with self.redis.pipeline(transaction=False) as pipe:
            pipe.zscore(keys.news_votes(news_id, VoteType.UP), user_id)
            pipe.zscore(keys.news_votes(news_id, VoteType.DOWN), user_id)
            up_score, down_score = await pipe.execute()
        return _vote_type(up_score, down_score)

    @translate_store_errors
    async def find_votes(
        self, news_ids: Sequence[NewsId], user_id: UserId
    ) -> dict[NewsId, Optional[VoteType]]:
        """Check the vote sets of many news items with one pipeline."""
        if not news_ids:
            return {}

        async with self.redis.pipeline(transaction=False) as pipe:
            for news_id in news_ids:
                pipe.zscore(keys.news_votes(news_id, VoteType.UP), user_id)
                pipe.zscore(keys.news_votes(news_id, VoteType.DOWN), user_id)
            scores = await pipe.execute()

        return {
            news_id: _vote_type(scores[i * 2], scores[i * 2 + 1])
            for i, news_id in enumerate(news_ids)
        }

    @translate_store_errors
    async def add(self, vote: Vote) -> bool:
        """Record a vote under WATCH on both vote sets.

        The counter and saved list are written in the same MULTI block, so
        a concurrent vote of either type by the same user aborts and
        retries against the updated sets.
        """
        up_key = keys.news_votes(vote.news_id, VoteType.UP)
        down_key = keys.news_votes(vote.news_id, VoteType.DOWN)
        member = str(vote.user_id)

        async def cast(pipe: Pipeline) -> bool:
            if await pipe.zscore(up_key, member) is not None:
                return False
            if await pipe.zscore(down_key, member) is not None:
                return False

            pipe.multi()
            pipe.zadd(
                keys.news_votes(vote.news_id, vote.type), {member: vote.created_at}
            )
            pipe.hincrby(keys.news(vote.news_id), vote.type.value, 1)
            if vote.type == VoteType.UP:
                pipe.zadd(
                    keys.user_saved(vote.user_id),
                    {str(vote.news_id): vote.created_at},
                )
            return True

        with logfire.span(
            "vote_repository.add",
            news_id=vote.news_id,
            user_id=vote.user_id,
            type=vote.type.value,
        ):
            return await self.redis.transaction(
                cast, up_key, down_key, value_from_callable=True
            )

    @translate_store_errors
    async def count(self, news_id: NewsId) -> tuple[int, int]:
        """ZCARD of both vote sets."""
        async with self.redis.pipeline(transaction=False) as pipe:
            pipe.zcard(keys.news_votes(news_id, VoteType.UP))
            pipe.zcard(keys.news_votes(news_id, VoteType.DOWN))
            upvotes, downvotes = await pipe.execute()
        return int(upvotes), int(downvotes)
