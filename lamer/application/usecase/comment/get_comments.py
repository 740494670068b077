"""Get comments use case."""

from typing import Optional

from pydantic import BaseModel

from lamer.application.usecase.base import BaseUseCase
from lamer.domain.error import NotFoundError
from lamer.domain.model import News
from lamer.domain.service import CommentService, NewsService, UserService
from lamer.domain.value import NewsId, VoteType


class CommentItem(BaseModel):
    """Comment item in response."""

    comment_id: int
    parent_id: int
    depth: int
    user_id: int
    username: Optional[str]
    body: Optional[str]  # None for deleted comments
    score: int
    created_at: int
    deleted: bool
    voted: Optional[VoteType]


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    news_id: int
    auth_token: Optional[str] = None  # Annotates the user's votes when given


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    news: News
    comments: list[CommentItem]
    total: int


class GetCommentsUseCase(BaseUseCase):
    """Use case for reading a news item with its comment thread."""

    def __init__(
        self,
        comment_service: CommentService,
        news_service: NewsService,
        user_service: UserService,
    ) -> None:
        """Initialize get comments use case.

        Args:
            comment_service: Comment domain service
            news_service: News domain service
            user_service: User domain service
        """
        self.comment_service = comment_service
        self.news_service = news_service
        self.user_service = user_service

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Comments are flattened depth-first in display order (higher score
        first, newer first among equals), each with its depth, so the
        caller can render the thread without rebuilding the tree.

        Raises:
            NotFoundError: If the news item does not exist
        """
        user = await self.user_service.authenticate_user(request.auth_token)

        news = await self.news_service.get_news_by_id(
            NewsId(request.news_id), user, update_rank=True
        )
        if not news:
            raise NotFoundError("News", str(request.news_id))

        thread = await self.comment_service.get_news_comments(news)

        items = []
        for depth, comment in thread.walk():
            voted = None
            if user and user.id in comment.up:
                voted = VoteType.UP
            elif user and user.id in comment.down:
                voted = VoteType.DOWN

            items.append(
                CommentItem(
                    comment_id=comment.id,
                    parent_id=comment.parent_id,
                    depth=depth,
                    user_id=comment.user_id,
                    username=comment.user.username if comment.user else None,
                    body=None if comment.deleted else comment.body,
                    score=comment.score,
                    created_at=comment.created_at,
                    deleted=comment.deleted,
                    voted=voted,
                )
            )

        return GetCommentsResponse(news=news, comments=items, total=len(items))
