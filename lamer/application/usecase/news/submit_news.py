"""Submit news use case."""

import logfire
from pydantic import BaseModel

from lamer.application.usecase.base import BaseUseCase, require_user
from lamer.config import CommentSettings, NewsSettings
from lamer.domain.error import RateLimitedError, ValidationError
from lamer.domain.service import NewsService, UserService
from lamer.domain.value import NewsId

SUBMIT_ACTION = "submit_news"


class SubmitNewsRequest(BaseModel):
    """Submit news request.

    Exactly one of ``url`` and ``text`` is expected; ``news_id`` of -1
    submits a new item, any other id edits an existing one.
    """

    auth_token: str
    title: str
    url: str = ""
    text: str = ""
    news_id: int = -1


class SubmitNewsResponse(BaseModel):
    """Submit news response."""

    news_id: int


class SubmitNewsUseCase(BaseUseCase):
    """Use case for submitting or editing a news item."""

    def __init__(
        self,
        news_service: NewsService,
        user_service: UserService,
        news_settings: NewsSettings,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize submit news use case.

        Args:
            news_service: News domain service
            user_service: User domain service
            news_settings: Title length and submission settings
            comment_settings: Text post length
        """
        self.news_service = news_service
        self.user_service = user_service
        self.news_settings = news_settings
        self.comment_settings = comment_settings

    def _validate(self, request: SubmitNewsRequest) -> None:
        if not request.title:
            raise ValidationError("Please specify a news title")
        if not request.url and not request.text:
            raise ValidationError("Please specify a news title and address or text")
        if request.url and request.text:
            raise ValidationError("News can have either an address or text, not both")
        if request.url and not request.url.startswith(("http://", "https://")):
            raise ValidationError("URL must start with http:// or https://")
        if len(request.title) > self.news_settings.title_max_length:
            raise ValidationError(
                f"Title too long (max {self.news_settings.title_max_length})"
            )
        if not request.url and len(request.text) > self.comment_settings.comment_max_length:
            raise ValidationError(
                f"Text too long (max {self.comment_settings.comment_max_length})"
            )

    async def execute(self, request: SubmitNewsRequest) -> SubmitNewsResponse:
        """Execute submit flow.

        Steps:
        1. Authenticate and validate the submission
        2. New item: check the submission cool-down, then insert
        3. Existing item: edit (owner only, within the edit window)

        Raises:
            AuthenticationError: If the token does not identify a user
            ValidationError: If the submission is malformed
            RateLimitedError: If the user submitted too recently
        """
        user = await require_user(self.user_service, request.auth_token)
        self._validate(request)

        if request.news_id == -1:
            eta = await self.news_service.get_new_post_eta(user)
            if eta > 0:
                logfire.info("Submission cool-down active", user_id=user.id, eta=eta)
                raise RateLimitedError(SUBMIT_ACTION, eta)

            news_id = await self.news_service.insert_news(
                request.title, request.url, request.text, user.id
            )
        else:
            news_id = await self.news_service.edit_news(
                user, NewsId(request.news_id), request.title, request.url, request.text
            )

        return SubmitNewsResponse(news_id=news_id)
