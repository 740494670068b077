"""Authenticate use case."""

from typing import Optional

from pydantic import BaseModel

from lamer.config import KarmaSettings
from lamer.domain.model import User
from lamer.domain.service import UserService

from lamer.application.usecase.base import BaseUseCase


class AuthenticateRequest(BaseModel):
    """Authenticate request."""

    auth_token: Optional[str] = None


class AuthenticateResponse(BaseModel):
    """Authenticate response, ``user`` is None for anonymous requests."""

    user: Optional[User]
    karma_incremented: bool = False


class AuthenticateUseCase(BaseUseCase):
    """Use case run at the start of every request.

    Resolves the auth token and lets the user's karma grow while browsing.
    """

    def __init__(
        self, user_service: UserService, karma_settings: KarmaSettings
    ) -> None:
        """Initialize authenticate use case.

        Args:
            user_service: User domain service
            karma_settings: Karma accrual interval and amount
        """
        self.user_service = user_service
        self.karma_settings = karma_settings

    async def execute(self, request: AuthenticateRequest) -> AuthenticateResponse:
        user = await self.user_service.authenticate_user(request.auth_token)
        if not user:
            return AuthenticateResponse(user=None)

        incremented, user = await self.user_service.increment_user_karma(
            user,
            self.karma_settings.increment_amount,
            self.karma_settings.increment_interval,
        )
        return AuthenticateResponse(user=user, karma_incremented=incremented)
