"""Comment use cases."""

from .get_comments import (
    CommentItem,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
)
from .handle_comment import (
    HandleCommentRequest,
    HandleCommentResponse,
    HandleCommentUseCase,
)

__all__ = [
    "CommentItem",
    "GetCommentsRequest",
    "GetCommentsResponse",
    "GetCommentsUseCase",
    "HandleCommentRequest",
    "HandleCommentResponse",
    "HandleCommentUseCase",
]
