"""Redis implementation of Comment repository."""

import json
from typing import Any, List, Mapping, Optional, Sequence

import logfire
from redis.asyncio import Redis
from redis.asyncio.client import Pipeline

from lamer.domain.model import Comment
from lamer.domain.repository.comment import CommentRepository
from lamer.domain.value import CommentId, NewsId, UserId, VoteType
from lamer.persistence import keys
from lamer.persistence.error import translate_store_errors
from lamer.persistence.mappers import (
    comment_to_json,
    comment_updates_to_data,
    data_to_comment,
    decode_comment,
)


def _opposite(vote_type: VoteType) -> str:
    return VoteType.DOWN.value if vote_type == VoteType.UP else VoteType.UP.value


class RedisCommentRepository(CommentRepository):
    """Redis implementation of CommentRepository.

    Each news item owns one ``thread:comment:<news id>`` hash: the
    ``nextid`` field is the id counter, every other field is a comment id
    mapped to the comment's JSON document.
    """

    def __init__(self, redis: Redis) -> None:
        """Initialize repository with a Redis client.

        Args:
            redis: Async Redis client (responses decoded to str)
        """
        self.redis = redis

    @translate_store_errors
    async def next_id(self, news_id: NewsId) -> CommentId:
        """Allocate the next id with HINCRBY on the thread counter."""
        return CommentId(
            await self.redis.hincrby(keys.thread(news_id), keys.THREAD_NEXT_ID, 1)
        )

    @translate_store_errors
    async def find(self, news_id: NewsId, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment in its thread."""
        raw = await self.redis.hget(keys.thread(news_id), str(comment_id))
        if not raw:
            return None
        return decode_comment(news_id, comment_id, raw)

    @translate_store_errors
    async def exists(self, news_id: NewsId, comment_id: CommentId) -> bool:
        return bool(await self.redis.hexists(keys.thread(news_id), str(comment_id)))

    @translate_store_errors
    async def find_thread(self, news_id: NewsId) -> List[Comment]:
        """Load the whole thread, ordered by comment id."""
        with logfire.span("comment_repository.find_thread", news_id=news_id):
            fields = await self.redis.hgetall(keys.thread(news_id))
            comments = [
                decode_comment(news_id, CommentId(int(field)), raw)
                for field, raw in fields.items()
                if field != keys.THREAD_NEXT_ID
            ]
            comments.sort(key=lambda c: c.id)
            return comments

    @translate_store_errors
    async def find_by_refs(
        self, refs: Sequence[tuple[NewsId, CommentId]]
    ) -> List[Comment]:
        """Load comments across threads with one pipeline."""
        if not refs:
            return []

        async with self.redis.pipeline(transaction=False) as pipe:
            for news_id, comment_id in refs:
                pipe.hget(keys.thread(news_id), str(comment_id))
            documents = await pipe.execute()

        return [
            decode_comment(news_id, comment_id, raw)
            for (news_id, comment_id), raw in zip(refs, documents)
            if raw
        ]

    @translate_store_errors
    async def save(self, comment: Comment) -> Comment:
        """Write the comment document into its thread."""
        await self.redis.hset(
            keys.thread(comment.news_id), str(comment.id), comment_to_json(comment)
        )
        return comment

    @translate_store_errors
    async def update(
        self,
        news_id: NewsId,
        comment_id: CommentId,
        updates: Mapping[str, Any],
    ) -> Optional[Comment]:
        """Merge updates under WATCH on the thread hash."""
        thread_key = keys.thread(news_id)
        changes = comment_updates_to_data(updates)

        async def merge(pipe: Pipeline) -> Optional[Comment]:
            raw = await pipe.hget(thread_key, str(comment_id))
            if not raw:
                return None

            data = json.loads(raw)
            data.update(changes)

            pipe.multi()
            pipe.hset(thread_key, str(comment_id), json.dumps(data))
            return data_to_comment(news_id, comment_id, data)

        with logfire.span(
            "comment_repository.update",
            news_id=news_id,
            comment_id=comment_id,
            fields=sorted(updates),
        ):
            return await self.redis.transaction(
                merge, thread_key, value_from_callable=True
            )

    @translate_store_errors
    async def add_vote(
        self,
        news_id: NewsId,
        comment_id: CommentId,
        user_id: UserId,
        vote_type: VoteType,
    ) -> Optional[Comment]:
        """Append the voter under WATCH, refusing a second vote."""
        thread_key = keys.thread(news_id)

        async def cast(pipe: Pipeline) -> Optional[Comment]:
            raw = await pipe.hget(thread_key, str(comment_id))
            if not raw:
                return None

            data = json.loads(raw)
            voters = data.setdefault(vote_type.value, [])
            if user_id in voters or user_id in data.get(_opposite(vote_type), []):
                return None

            voters.append(user_id)
            data["score"] = int(data.get("score", 0)) + (
                1 if vote_type == VoteType.UP else -1
            )

            pipe.multi()
            pipe.hset(thread_key, str(comment_id), json.dumps(data))
            return data_to_comment(news_id, comment_id, data)

        return await self.redis.transaction(cast, thread_key, value_from_callable=True)

    @translate_store_errors
    async def add_user_comment(self, user_id: UserId, comment: Comment) -> None:
        """Index the comment under its author."""
        await self.redis.zadd(
            keys.user_comments(user_id),
            {keys.comment_ref(comment.news_id, comment.id): comment.created_at},
        )

    @translate_store_errors
    async def user_comment_refs(
        self, user_id: UserId, start: int, count: int
    ) -> List[tuple[NewsId, CommentId]]:
        """Refs from user.comments, newest first."""
        members = await self.redis.zrevrange(
            keys.user_comments(user_id), start, start + count - 1
        )
        return [keys.parse_comment_ref(member) for member in members]

    @translate_store_errors
    async def count_user_comments(self, user_id: UserId) -> int:
        return int(await self.redis.zcard(keys.user_comments(user_id)))

    @translate_store_errors
    async def add_reply(self, user_id: UserId, comment: Comment) -> None:
        """Index the reply under the user being replied to."""
        await self.redis.zadd(
            keys.user_replies(user_id),
            {keys.comment_ref(comment.news_id, comment.id): comment.created_at},
        )

    @translate_store_errors
    async def reply_refs(
        self, user_id: UserId, start: int, count: int
    ) -> List[tuple[NewsId, CommentId]]:
        """Refs from user.replies, newest first."""
        members = await self.redis.zrevrange(
            keys.user_replies(user_id), start, start + count - 1
        )
        return [keys.parse_comment_ref(member) for member in members]
