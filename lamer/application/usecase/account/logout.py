"""Logout use case."""

from pydantic import BaseModel

from lamer.domain.error import AuthenticationError
from lamer.domain.service import UserService

from lamer.application.usecase.base import BaseUseCase, require_user


class LogoutRequest(BaseModel):
    """Logout request."""

    auth_token: str


class LogoutResponse(BaseModel):
    """Logout response.

    The previous token no longer authenticates; the client must log in again.
    """

    rotated: bool


class LogoutUseCase(BaseUseCase):
    """Use case for logging out every session of a user."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: LogoutRequest) -> LogoutResponse:
        """Rotate the user's auth token.

        Raises:
            AuthenticationError: If the token does not identify a user
        """
        user = await require_user(self.user_service, request.auth_token)
        new_token = await self.user_service.update_auth_token(user.id)
        if not new_token:
            raise AuthenticationError("Not authenticated")
        return LogoutResponse(rotated=True)
