"""Test configuration and helpers."""

import logfire

from lamer.domain.model import User
from lamer.domain.service import Service, UserService

# Keep spans local and quiet during tests
logfire.configure(send_to_logfire=False, console=False)


async def register_user(env, username: str, password: str = "secret-password") -> User:
    """Helper to create a user through the user service.

    Args:
        env: Request-scoped test container
        username: Username to register
        password: Clear text password

    Returns:
        The created user
    """
    user_service = await env.get(UserService)
    _, user = await user_service.create_user(username, password)
    return user


def freeze_time(monkeypatch, now: int) -> None:
    """Pin the clock every domain service reads."""
    monkeypatch.setattr(Service, "now", staticmethod(lambda: now))
