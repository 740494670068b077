"""List news use case."""

from typing import Optional

from pydantic import BaseModel

from lamer.application.usecase.base import BaseUseCase
from lamer.domain.model import News
from lamer.domain.service import NewsService, UserService
from lamer.domain.value import NewsListing


class ListNewsRequest(BaseModel):
    """List news request."""

    listing: NewsListing = NewsListing.TOP
    auth_token: Optional[str] = None  # Annotates the user's votes when given
    start: int = 0
    count: Optional[int] = None  # Defaults to the listing's page size


class ListNewsResponse(BaseModel):
    """List news response."""

    listing: NewsListing
    news: list[News]


class ListNewsUseCase(BaseUseCase):
    """Use case for reading the top or latest news views."""

    def __init__(self, news_service: NewsService, user_service: UserService) -> None:
        """Initialize list news use case.

        Args:
            news_service: News domain service
            user_service: User domain service
        """
        self.news_service = news_service
        self.user_service = user_service

    async def execute(self, request: ListNewsRequest) -> ListNewsResponse:
        user = await self.user_service.authenticate_user(request.auth_token)

        if request.listing == NewsListing.TOP:
            news = await self.news_service.get_top_news(
                user, request.start, request.count
            )
        else:
            news = await self.news_service.get_latest_news(
                user, request.start, request.count
            )

        return ListNewsResponse(listing=request.listing, news=news)
