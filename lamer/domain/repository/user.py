"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from lamer.domain.model.user import User
from lamer.domain.value import UserId


class UserRepository(ABC):
    """Repository for User entity.

    Defines the contract for user persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def next_id(self) -> UserId:
        """Atomically allocate the next user id."""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_id_by_username(self, username: str) -> Optional[UserId]:
        """Resolve a username (case-insensitive) to a user id."""
        pass

    @abstractmethod
    async def find_id_by_auth_token(self, auth_token: str) -> Optional[UserId]:
        """Resolve an auth token to the id of the user holding it."""
        pass

    @abstractmethod
    async def claim_username(self, username: str, user_id: UserId) -> bool:
        """Reserve a username for a user id.

        The reservation is a conditional set, so of two concurrent claims
        for the same (case-folded) username exactly one succeeds.

        Args:
            username: Username as typed at signup
            user_id: Id the username should resolve to

        Returns:
            True if the username was free and is now reserved
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a new user record and its auth token mapping.

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass

    @abstractmethod
    async def replace_auth_token(
        self, user_id: UserId, old_token: str, new_token: str
    ) -> None:
        """Swap the user's auth token.

        The old token mapping is removed in the same transaction that
        installs the new one.
        """
        pass

    @abstractmethod
    async def touch_karma(
        self, user_id: UserId, increment: int, now: int, interval: int
    ) -> Optional[int]:
        """Add karma and move the accrual anchor to ``now``.

        The stored anchor is checked and moved atomically: nothing is
        written if it is newer than ``now - interval``.

        Returns:
            The user's karma after the increment, or None if the anchor
            was too recent
        """
        pass

    @abstractmethod
    async def increment_karma(self, user_id: UserId, increment: int) -> int:
        """Atomically add (or subtract) karma.

        Returns:
            The user's karma after the increment
        """
        pass

    @abstractmethod
    async def get_karma(self, user_id: UserId) -> Optional[int]:
        """Read the current karma, None for unknown users."""
        pass

    @abstractmethod
    async def update_profile(
        self,
        user_id: UserId,
        about: str,
        email: str,
        password_hash: Optional[str] = None,
    ) -> None:
        """Overwrite the editable profile fields."""
        pass

    @abstractmethod
    async def set_flags(self, user_id: UserId, flags: str) -> None:
        """Overwrite the user's capability flags."""
        pass

    @abstractmethod
    async def increment_replies(self, user_id: UserId) -> None:
        """Bump the unread replies counter."""
        pass

    @abstractmethod
    async def reset_replies(self, user_id: UserId) -> None:
        """Mark all replies as read."""
        pass

    @abstractmethod
    async def find_usernames(self, user_ids: Sequence[UserId]) -> list[Optional[str]]:
        """Resolve usernames for many users in one round trip.

        Returns:
            Usernames in the same order as ``user_ids`` (None when missing)
        """
        pass
