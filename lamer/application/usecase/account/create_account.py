"""Create account use case."""

import logfire
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from lamer.config import AuthSettings
from lamer.domain.error import RateLimitedError, ValidationError
from lamer.domain.service import RateLimitService, UserService
from lamer.domain.value import Username

from lamer.application.usecase.base import BaseUseCase

CREATE_USER_ACTION = "create_user"


class CreateAccountRequest(BaseModel):
    """Create account request."""

    username: str
    password: str
    client_tag: str  # Discriminates the caller for rate limiting (e.g. IP)


class CreateAccountResponse(BaseModel):
    """Create account response."""

    user_id: int
    username: str
    auth_token: str
    api_secret: str


class CreateAccountUseCase(BaseUseCase):
    """Use case for signing up a new user."""

    def __init__(
        self,
        user_service: UserService,
        rate_limit_service: RateLimitService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize create account use case.

        Args:
            user_service: User domain service
            rate_limit_service: Rate limit domain service
            auth_settings: Password rules and account creation delay
        """
        self.user_service = user_service
        self.rate_limit_service = rate_limit_service
        self.auth_settings = auth_settings

    async def execute(self, request: CreateAccountRequest) -> CreateAccountResponse:
        """Execute signup flow.

        Steps:
        1. Validate username and password
        2. Allow one account per client tag per creation window
        3. Create the user

        Raises:
            ValidationError: If the username or password is invalid
            RateLimitedError: If the client created an account recently
            UsernameTakenError: If the username is already registered
        """
        try:
            username = Username(request.username)
        except PydanticValidationError as e:
            raise ValidationError(e.errors()[0]["msg"]) from e

        if len(request.password) < self.auth_settings.password_min_length:
            raise ValidationError(
                f"Password is too short. Min length: "
                f"{self.auth_settings.password_min_length}"
            )

        tags = [CREATE_USER_ACTION, request.client_tag]
        if await self.rate_limit_service.rate_limited(
            self.auth_settings.account_creation_delay, tags
        ):
            retry_after = await self.rate_limit_service.retry_after(tags)
            logfire.warn(
                "Account creation throttled",
                client_tag=request.client_tag,
                retry_after=retry_after,
            )
            raise RateLimitedError(CREATE_USER_ACTION, retry_after)

        auth_token, user = await self.user_service.create_user(
            username.root, request.password
        )

        return CreateAccountResponse(
            user_id=user.id,
            username=user.username,
            auth_token=auth_token,
            api_secret=user.api_secret,
        )
