"""User domain service."""

from dataclasses import dataclass
from typing import Optional

import logfire

from lamer.config import AuthSettings, KarmaSettings
from lamer.domain.error import NotFoundError, UsernameTakenError
from lamer.domain.model import User
from lamer.domain.repository import (
    CommentRepository,
    NewsRepository,
    UserRepository,
)
from lamer.domain.value import UserFlag, UserId

from .base import Service
from .password_service import PasswordService

ABOUT_MAX_LENGTH = 4095
EMAIL_MAX_LENGTH = 255


@dataclass
class UserCounters:
    """Activity counters shown on a user's profile."""

    posted_news: int
    posted_comments: int


class UserService(Service):
    """Domain service for user accounts, credentials and karma."""

    def __init__(
        self,
        user_repository: UserRepository,
        news_repository: NewsRepository,
        comment_repository: CommentRepository,
        password_service: PasswordService,
        auth_settings: AuthSettings,
        karma_settings: KarmaSettings,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            news_repository: News repository (posted news counter)
            comment_repository: Comment repository (posted comments counter)
            password_service: Password hashing service
            auth_settings: Credential settings
            karma_settings: Karma settings
        """
        self.user_repository = user_repository
        self.news_repository = news_repository
        self.comment_repository = comment_repository
        self.password_service = password_service
        self.auth_settings = auth_settings
        self.karma_settings = karma_settings

    async def create_user(self, username: str, password: str) -> tuple[str, User]:
        """Register a new user.

        Username uniqueness is case-insensitive and decided by a conditional
        set on the username index, so two concurrent signups for the same
        name cannot both succeed.

        Args:
            username: Requested username (already validated)
            password: Clear text password

        Returns:
            Tuple of (auth token, created user)

        Raises:
            UsernameTakenError: If the username is already registered
        """
        with logfire.span("user_service.create_user", username=username):
            if await self.user_repository.find_id_by_username(username):
                logfire.warn("Username already taken", username=username)
                raise UsernameTakenError(username)

            user_id = await self.user_repository.next_id()
            if not await self.user_repository.claim_username(username, user_id):
                logfire.warn("Username claimed concurrently", username=username)
                raise UsernameTakenError(username)

            now = self.now()
            salt = self.password_service.generate_random()
            user = User(
                id=user_id,
                username=username,
                salt=salt,
                password_hash=self.password_service.hash_password(password, salt),
                created_at=now,
                karma=self.karma_settings.starting_karma,
                auth_token=self.password_service.generate_random(),
                api_secret=self.password_service.generate_random(),
                karma_incr_time=now,
            )
            await self.user_repository.save(user)

            logfire.info("User created", user_id=user.id, username=username)
            return user.auth_token, user

    async def get_user_by_id(self, user_id: UserId) -> Optional[User]:
        """Get user by ID.

        Returns:
            User if found, None otherwise
        """
        return await self.user_repository.find_by_id(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username (case-insensitive).

        Returns:
            User if found, None otherwise
        """
        user_id = await self.user_repository.find_id_by_username(username)
        if not user_id:
            return None
        return await self.user_repository.find_by_id(user_id)

    async def get_user_counters(self, user_id: UserId) -> UserCounters:
        """Count the news and comments posted by a user."""
        return UserCounters(
            posted_news=await self.news_repository.count_posted(user_id),
            posted_comments=await self.comment_repository.count_user_comments(
                user_id
            ),
        )

    async def verify_user_credentials(
        self, username: str, password: str
    ) -> Optional[tuple[str, str]]:
        """Check a username/password pair.

        The result does not reveal whether the username or the password
        was wrong.

        Returns:
            Tuple of (auth token, API secret), None on mismatch
        """
        with logfire.span("user_service.verify_user_credentials", username=username):
            user = await self.get_user_by_username(username)
            if not user:
                logfire.info("Login failed", username=username)
                return None

            if not self.password_service.verify_password(
                password, user.salt, user.password_hash
            ):
                logfire.info("Login failed", username=username)
                return None

            return user.auth_token, user.api_secret

    async def authenticate_user(self, auth_token: Optional[str]) -> Optional[User]:
        """Resolve an auth token to its user.

        Returns:
            The user holding the token, None for anonymous requests
        """
        if not auth_token:
            return None

        user_id = await self.user_repository.find_id_by_auth_token(auth_token)
        if not user_id:
            return None
        return await self.user_repository.find_by_id(user_id)

    async def update_auth_token(self, user_id: UserId) -> Optional[str]:
        """Rotate a user's auth token, invalidating the previous one.

        Returns:
            The new token, None if the user does not exist
        """
        with logfire.span("user_service.update_auth_token", user_id=user_id):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                return None

            new_token = self.password_service.generate_random()
            await self.user_repository.replace_auth_token(
                user_id, user.auth_token, new_token
            )
            logfire.info("Auth token rotated", user_id=user_id)
            return new_token

    async def increment_user_karma(
        self, user: User, increment: int, interval: int
    ) -> tuple[bool, User]:
        """Grant karma at most once per interval.

        Args:
            user: User to credit
            increment: Karma to add
            interval: Minimum seconds since the previous increment

        Returns:
            Tuple of (whether karma was added, up to date user)
        """
        now = self.now()
        if user.karma_incr_time >= now - interval:
            return False, user

        karma = await self.user_repository.touch_karma(
            user.id, increment, now, interval
        )
        if karma is None:
            # another request accrued first
            return False, user

        logfire.info("Karma accrued", user_id=user.id, karma=karma)
        return True, user.model_copy(update={"karma": karma, "karma_incr_time": now})

    async def increment_user_karma_by(self, user_id: UserId, increment: int) -> int:
        """Add (or with a negative increment, remove) karma unconditionally.

        Returns:
            The user's new karma
        """
        return await self.user_repository.increment_karma(user_id, increment)

    async def get_user_karma(self, user_id: UserId) -> Optional[int]:
        return await self.user_repository.get_karma(user_id)

    async def update_user_profile(
        self,
        user: User,
        about: str,
        email: str,
        password: Optional[str] = None,
    ) -> User:
        """Update the editable profile fields.

        ``about`` and ``email`` are truncated to their maximum lengths. A new
        password is hashed with the user's existing salt.

        Returns:
            Updated user
        """
        with logfire.span("user_service.update_user_profile", user_id=user.id):
            about = about[:ABOUT_MAX_LENGTH]
            email = email[:EMAIL_MAX_LENGTH]
            password_hash = None
            if password:
                password_hash = self.password_service.hash_password(
                    password, user.salt
                )

            await self.user_repository.update_profile(
                user.id, about, email, password_hash
            )

            updates = {"about": about, "email": email}
            if password_hash:
                updates["password_hash"] = password_hash
            return user.model_copy(update=updates)

    async def add_user_flags(self, user_id: UserId, flags: str) -> User:
        """Grant capability letters to a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_repository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))

        merged = user.flags + "".join(
            flag for flag in dict.fromkeys(flags) if flag not in user.flags
        )
        if merged != user.flags:
            await self.user_repository.set_flags(user_id, merged)
            logfire.info("User flags updated", user_id=user_id, flags=merged)
        return user.model_copy(update={"flags": merged})

    def check_user_flags(self, user: Optional[User], flags: str) -> bool:
        if not user:
            return False
        return user.has_flags(flags)

    def is_user_admin(self, user: Optional[User]) -> bool:
        return self.check_user_flags(user, UserFlag.ADMIN.value)
