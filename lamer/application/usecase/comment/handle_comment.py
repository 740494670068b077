"""Handle comment use case."""

from typing import Optional

from pydantic import BaseModel

from lamer.application.usecase.base import BaseUseCase, require_user
from lamer.domain.service import CommentService, UserService
from lamer.domain.value import CommentId, CommentOp, NewsId


class HandleCommentRequest(BaseModel):
    """Handle comment request.

    ``comment_id`` -1 posts a new comment under ``parent_id`` (-1 for a
    top-level comment). For an existing comment a body updates it and an
    empty body deletes it.
    """

    auth_token: str
    news_id: int
    comment_id: int = -1
    parent_id: Optional[int] = -1
    body: Optional[str] = None


class HandleCommentResponse(BaseModel):
    """Handle comment response."""

    news_id: int
    comment_id: int
    op: CommentOp


class HandleCommentUseCase(BaseUseCase):
    """Use case for inserting, updating and deleting comments."""

    def __init__(
        self, comment_service: CommentService, user_service: UserService
    ) -> None:
        """Initialize handle comment use case.

        Args:
            comment_service: Comment domain service
            user_service: User domain service
        """
        self.comment_service = comment_service
        self.user_service = user_service

    async def execute(self, request: HandleCommentRequest) -> HandleCommentResponse:
        """Execute comment write.

        Raises:
            AuthenticationError: If the token does not identify a user
            DomainError: Any failure reported by the comment service
        """
        user = await require_user(self.user_service, request.auth_token)

        parent_id = (
            CommentId(request.parent_id) if request.parent_id is not None else None
        )
        result = await self.comment_service.handle_comment(
            user,
            NewsId(request.news_id),
            CommentId(request.comment_id),
            parent_id,
            request.body,
        )

        return HandleCommentResponse(
            news_id=result.news_id, comment_id=result.comment_id, op=result.op
        )
