"""Login use case."""

from pydantic import BaseModel

from lamer.domain.error import AuthenticationError
from lamer.domain.service import UserService

from lamer.application.usecase.base import BaseUseCase


class LoginRequest(BaseModel):
    """Login request."""

    username: str
    password: str


class LoginResponse(BaseModel):
    """Login response."""

    auth_token: str
    api_secret: str


class LoginUseCase(BaseUseCase):
    """Use case for exchanging credentials for an auth token."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Execute login flow.

        Raises:
            AuthenticationError: If the username or password is wrong
        """
        credentials = await self.user_service.verify_user_credentials(
            request.username, request.password
        )
        if not credentials:
            raise AuthenticationError("Wrong username or password")

        auth_token, api_secret = credentials
        return LoginResponse(auth_token=auth_token, api_secret=api_secret)
