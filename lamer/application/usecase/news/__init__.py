"""News use cases."""

from .list_news import ListNewsRequest, ListNewsResponse, ListNewsUseCase
from .submit_news import SubmitNewsRequest, SubmitNewsResponse, SubmitNewsUseCase
from .vote_news import VoteNewsRequest, VoteNewsResponse, VoteNewsUseCase

__all__ = [
    "ListNewsRequest",
    "ListNewsResponse",
    "ListNewsUseCase",
    "SubmitNewsRequest",
    "SubmitNewsResponse",
    "SubmitNewsUseCase",
    "VoteNewsRequest",
    "VoteNewsResponse",
    "VoteNewsUseCase",
]
