"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from lamer.domain.error import AuthenticationError
from lamer.domain.model import User
from lamer.domain.service import UserService


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        pass


async def require_user(user_service: UserService, auth_token: Optional[str]) -> User:
    """Resolve the auth token of a request that needs a logged in user.

    Raises:
        AuthenticationError: If the token does not identify a user
    """
    user = await user_service.authenticate_user(auth_token)
    if not user:
        raise AuthenticationError("Not authenticated")
    return user
