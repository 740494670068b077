"""Redis implementation of User repository."""

from typing import Optional, Sequence

import logfire
from redis.asyncio import Redis
from redis.asyncio.client import Pipeline

from lamer.domain.model import User
from lamer.domain.repository.user import UserRepository
from lamer.domain.value import UserId
from lamer.persistence import keys
from lamer.persistence.error import translate_store_errors
from lamer.persistence.mappers import hash_to_user, user_to_hash


class RedisUserRepository(UserRepository):
    """Redis implementation of UserRepository."""

    def __init__(self, redis: Redis) -> None:
        """Initialize repository with a Redis client.

        Args:
            redis: Async Redis client (responses decoded to str)
        """
        self.redis = redis

    @translate_store_errors
    async def next_id(self) -> UserId:
        """Allocate the next user id."""
        return UserId(await self.redis.incr(keys.USERS_COUNT))

    @translate_store_errors
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        with logfire.span("user_repository.find_by_id", user_id=user_id):
            data = await self.redis.hgetall(keys.user(user_id))
            if not data:
                return None
            return hash_to_user(data)

    @translate_store_errors
    async def find_id_by_username(self, username: str) -> Optional[UserId]:
        """Resolve a username to a user id."""
        value = await self.redis.get(keys.username_to_id(username))
        return UserId(int(value)) if value else None

    @translate_store_errors
    async def find_id_by_auth_token(self, auth_token: str) -> Optional[UserId]:
        """Resolve an auth token to a user id."""
        value = await self.redis.get(keys.auth(auth_token))
        return UserId(int(value)) if value else None

    @translate_store_errors
    async def claim_username(self, username: str, user_id: UserId) -> bool:
        """Reserve a username with a conditional set."""
        claimed = await self.redis.set(keys.username_to_id(username), user_id, nx=True)
        return bool(claimed)

    @translate_store_errors
    async def save(self, user: User) -> User:
        """Write the user hash and its auth token mapping."""
        with logfire.span("user_repository.save", user_id=user.id):
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.hset(keys.user(user.id), mapping=user_to_hash(user))
                pipe.set(keys.auth(user.auth_token), user.id)
                await pipe.execute()
            return user

    @translate_store_errors
    async def replace_auth_token(
        self, user_id: UserId, old_token: str, new_token: str
    ) -> None:
        """Swap auth tokens inside one MULTI/EXEC block."""
        with logfire.span("user_repository.replace_auth_token", user_id=user_id):
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(keys.auth(old_token))
                pipe.hset(keys.user(user_id), "auth", new_token)
                pipe.set(keys.auth(new_token), user_id)
                await pipe.execute()

    @translate_store_errors
    async def touch_karma(
        self, user_id: UserId, increment: int, now: int, interval: int
    ) -> Optional[int]:
        """Add karma under WATCH if the stored anchor is old enough."""
        user_key = keys.user(user_id)

        async def accrue(pipe: Pipeline) -> Optional[int]:
            anchor, karma = await pipe.hmget(user_key, "karma_incr_time", "karma")
            if int(anchor or 0) >= now - interval:
                return None

            pipe.multi()
            pipe.hset(user_key, "karma_incr_time", now)
            pipe.hincrby(user_key, "karma", increment)
            return int(karma or 0) + increment

        with logfire.span("user_repository.touch_karma", user_id=user_id):
            return await self.redis.transaction(
                accrue, user_key, value_from_callable=True
            )

    @translate_store_errors
    async def increment_karma(self, user_id: UserId, increment: int) -> int:
        """Atomically add karma."""
        return int(await self.redis.hincrby(keys.user(user_id), "karma", increment))

    @translate_store_errors
    async def get_karma(self, user_id: UserId) -> Optional[int]:
        """Read the user's karma."""
        value = await self.redis.hget(keys.user(user_id), "karma")
        return int(value) if value is not None else None

    @translate_store_errors
    async def update_profile(
        self,
        user_id: UserId,
        about: str,
        email: str,
        password_hash: Optional[str] = None,
    ) -> None:
        """Overwrite profile fields."""
        mapping = {"about": about, "email": email}
        if password_hash is not None:
            mapping["password"] = password_hash
        await self.redis.hset(keys.user(user_id), mapping=mapping)

    @translate_store_errors
    async def set_flags(self, user_id: UserId, flags: str) -> None:
        """Overwrite the flags string."""
        await self.redis.hset(keys.user(user_id), "flags", flags)

    @translate_store_errors
    async def increment_replies(self, user_id: UserId) -> None:
        """Bump unread replies."""
        await self.redis.hincrby(keys.user(user_id), "replies", 1)

    @translate_store_errors
    async def reset_replies(self, user_id: UserId) -> None:
        """Clear unread replies."""
        await self.redis.hset(keys.user(user_id), "replies", 0)

    @translate_store_errors
    async def find_usernames(self, user_ids: Sequence[UserId]) -> list[Optional[str]]:
        """Resolve usernames with a single pipeline."""
        if not user_ids:
            return []

        async with self.redis.pipeline(transaction=False) as pipe:
            for user_id in user_ids:
                pipe.hget(keys.user(user_id), "username")
            return list(await pipe.execute())
