"""Redis implementation of News repository."""

from typing import List, Mapping, Optional, Sequence

import logfire
from redis.asyncio import Redis

from lamer.domain.model import News
from lamer.domain.repository.news import NewsRepository
from lamer.domain.value import NewsId, UserId
from lamer.persistence import keys
from lamer.persistence.error import translate_store_errors
from lamer.persistence.mappers import hash_to_news, news_to_hash


def _to_ids(members: Sequence[str]) -> List[NewsId]:
    return [NewsId(int(member)) for member in members]


class RedisNewsRepository(NewsRepository):
    """Redis implementation of NewsRepository."""

    def __init__(self, redis: Redis) -> None:
        """Initialize repository with a Redis client.

        Args:
            redis: Async Redis client (responses decoded to str)
        """
        self.redis = redis

    @translate_store_errors
    async def next_id(self) -> NewsId:
        """Allocate the next news id."""
        return NewsId(await self.redis.incr(keys.NEWS_COUNT))

    @translate_store_errors
    async def find_by_id(self, news_id: NewsId) -> Optional[News]:
        """Find a news item by ID."""
        with logfire.span("news_repository.find_by_id", news_id=news_id):
            data = await self.redis.hgetall(keys.news(news_id))
            if not data:
                logfire.debug("News not found", news_id=news_id)
                return None
            return hash_to_news(data)

    @translate_store_errors
    async def find_many(self, news_ids: Sequence[NewsId]) -> List[News]:
        """Load several news hashes with one pipeline."""
        if not news_ids:
            return []

        with logfire.span("news_repository.find_many", count=len(news_ids)):
            async with self.redis.pipeline(transaction=False) as pipe:
                for news_id in news_ids:
                    pipe.hgetall(keys.news(news_id))
                rows = await pipe.execute()

            return [hash_to_news(row) for row in rows if row]

    @translate_store_errors
    async def save(self, news: News) -> News:
        """Write the full news hash."""
        with logfire.span("news_repository.save", news_id=news.id):
            await self.redis.hset(keys.news(news.id), mapping=news_to_hash(news))
            return news

    @translate_store_errors
    async def update_content(self, news_id: NewsId, title: str, url: str) -> None:
        """Overwrite title and URL."""
        await self.redis.hset(keys.news(news_id), mapping={"title": title, "url": url})

    @translate_store_errors
    async def mark_deleted(self, news_id: NewsId) -> None:
        """Flag as deleted and remove from the global views."""
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(keys.news(news_id), "del", 1)
            pipe.zrem(keys.NEWS_TOP, news_id)
            pipe.zrem(keys.NEWS_CRON, news_id)
            await pipe.execute()

    @translate_store_errors
    async def set_score_and_rank(
        self, news_id: NewsId, score: float, rank: float
    ) -> None:
        """Store score and rank and move the item in the top view."""
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(keys.news(news_id), mapping={"score": score, "rank": rank})
            pipe.zadd(keys.NEWS_TOP, {str(news_id): rank})
            await pipe.execute()

    @translate_store_errors
    async def update_ranks(self, ranks: Mapping[NewsId, float]) -> None:
        """Store reconciled ranks with one pipeline."""
        if not ranks:
            return

        async with self.redis.pipeline(transaction=False) as pipe:
            for news_id, rank in ranks.items():
                pipe.hset(keys.news(news_id), "rank", rank)
                pipe.zadd(keys.NEWS_TOP, {str(news_id): rank})
            await pipe.execute()

    @translate_store_errors
    async def increment_comments(self, news_id: NewsId, amount: int) -> int:
        """Adjust the comment counter."""
        return int(await self.redis.hincrby(keys.news(news_id), "comments", amount))

    @translate_store_errors
    async def add_to_indexes(self, news: News) -> None:
        """Index into user.posted, news.cron and news.top."""
        member = str(news.id)
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zadd(keys.user_posted(news.user_id), {member: news.created_at})
            pipe.zadd(keys.NEWS_CRON, {member: news.created_at})
            pipe.zadd(keys.NEWS_TOP, {member: news.rank})
            await pipe.execute()

    @translate_store_errors
    async def find_id_by_url(self, url: str) -> Optional[NewsId]:
        """Read the repost lock."""
        value = await self.redis.get(keys.url(url))
        return NewsId(int(value)) if value else None

    @translate_store_errors
    async def lock_url(self, url: str, news_id: NewsId, ttl: int) -> bool:
        """Take the repost lock with SET NX EX."""
        locked = await self.redis.set(keys.url(url), news_id, nx=True, ex=ttl)
        return bool(locked)

    @translate_store_errors
    async def release_url(self, url: str) -> None:
        """Drop the repost lock."""
        await self.redis.delete(keys.url(url))

    @translate_store_errors
    async def top_ids(self, start: int, count: int) -> List[NewsId]:
        """Ids by cached rank, highest first."""
        return _to_ids(await self.redis.zrevrange(keys.NEWS_TOP, start, start + count - 1))

    @translate_store_errors
    async def latest_ids(self, start: int, count: int) -> List[NewsId]:
        """Ids by creation time, newest first."""
        return _to_ids(
            await self.redis.zrevrange(keys.NEWS_CRON, start, start + count - 1)
        )

    @translate_store_errors
    async def saved_ids(self, user_id: UserId, start: int, count: int) -> List[NewsId]:
        """Ids saved by the user, newest first."""
        return _to_ids(
            await self.redis.zrevrange(keys.user_saved(user_id), start, start + count - 1)
        )

    @translate_store_errors
    async def count_saved(self, user_id: UserId) -> int:
        return int(await self.redis.zcard(keys.user_saved(user_id)))

    @translate_store_errors
    async def posted_ids(
        self, user_id: UserId, start: int, count: int
    ) -> List[NewsId]:
        """Ids posted by the user, newest first."""
        return _to_ids(
            await self.redis.zrevrange(
                keys.user_posted(user_id), start, start + count - 1
            )
        )

    @translate_store_errors
    async def count_posted(self, user_id: UserId) -> int:
        return int(await self.redis.zcard(keys.user_posted(user_id)))

    @translate_store_errors
    async def mark_submitted(self, user_id: UserId, ttl: int) -> None:
        """Install the cool-down marker."""
        await self.redis.setex(keys.submitted_recently(user_id), ttl, 1)

    @translate_store_errors
    async def submission_ttl(self, user_id: UserId) -> int:
        """TTL of the cool-down marker (-2 when absent)."""
        return int(await self.redis.ttl(keys.submitted_recently(user_id)))
