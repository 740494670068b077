"""Vote news use case."""

from pydantic import BaseModel

from lamer.application.usecase.base import BaseUseCase, require_user
from lamer.domain.service import UserService, VoteService
from lamer.domain.value import NewsId


class VoteNewsRequest(BaseModel):
    """Vote news request."""

    auth_token: str
    news_id: int
    vote_type: str  # "up" or "down", validated by the vote service


class VoteNewsResponse(BaseModel):
    """Vote news response."""

    news_id: int
    rank: float


class VoteNewsUseCase(BaseUseCase):
    """Use case for voting a news item."""

    def __init__(self, vote_service: VoteService, user_service: UserService) -> None:
        """Initialize vote news use case.

        Args:
            vote_service: Vote domain service
            user_service: User domain service
        """
        self.vote_service = vote_service
        self.user_service = user_service

    async def execute(self, request: VoteNewsRequest) -> VoteNewsResponse:
        """Execute vote flow.

        Raises:
            AuthenticationError: If the token does not identify a user
            ValidationError: If the vote type is invalid
            DuplicateVoteError: If the user already voted the item
        """
        user = await require_user(self.user_service, request.auth_token)
        rank = await self.vote_service.vote_news(
            NewsId(request.news_id), user.id, request.vote_type
        )
        return VoteNewsResponse(news_id=request.news_id, rank=rank)
