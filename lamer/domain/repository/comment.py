"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Sequence

from lamer.domain.model.comment import Comment
from lamer.domain.value import CommentId, NewsId, UserId, VoteType


class CommentRepository(ABC):
    """Repository for Comment entity.

    Comments are stored per news thread, keyed by a thread-local id
    allocated from a counter kept next to the comments.
    """

    @abstractmethod
    async def next_id(self, news_id: NewsId) -> CommentId:
        """Atomically allocate the next comment id of a thread."""
        pass

    @abstractmethod
    async def find(self, news_id: NewsId, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by thread and id.

        Args:
            news_id: The news item owning the thread
            comment_id: Thread-local comment id

        Returns:
            The comment (possibly a tombstone) if found, None otherwise
        """
        pass

    @abstractmethod
    async def exists(self, news_id: NewsId, comment_id: CommentId) -> bool:
        pass

    @abstractmethod
    async def find_thread(self, news_id: NewsId) -> List[Comment]:
        """Load every comment of a thread, tombstones included."""
        pass

    @abstractmethod
    async def find_by_refs(
        self, refs: Sequence[tuple[NewsId, CommentId]]
    ) -> List[Comment]:
        """Load comments from several threads in one round trip.

        Missing comments are skipped; the order of ``refs`` is kept.
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Write a comment into its thread."""
        pass

    @abstractmethod
    async def update(
        self,
        news_id: NewsId,
        comment_id: CommentId,
        updates: Mapping[str, Any],
    ) -> Optional[Comment]:
        """Merge ``updates`` into a stored comment.

        Only the named fields change. The read-merge-write is retried if
        the thread changes concurrently.

        Args:
            news_id: The news item owning the thread
            comment_id: Thread-local comment id
            updates: Comment field names mapped to new values

        Returns:
            The updated comment, None if it does not exist
        """
        pass

    @abstractmethod
    async def add_vote(
        self,
        news_id: NewsId,
        comment_id: CommentId,
        user_id: UserId,
        vote_type: VoteType,
    ) -> Optional[Comment]:
        """Append a voter to the comment's up or down list.

        The check that the user has not voted yet and the append happen in
        one optimistic transaction; the score moves by one.

        Returns:
            The updated comment, None if it does not exist or the user
            already voted it
        """
        pass

    @abstractmethod
    async def add_user_comment(self, user_id: UserId, comment: Comment) -> None:
        """Append the comment to its author's activity index."""
        pass

    @abstractmethod
    async def user_comment_refs(
        self, user_id: UserId, start: int, count: int
    ) -> List[tuple[NewsId, CommentId]]:
        """References to a user's comments, newest first."""
        pass

    @abstractmethod
    async def count_user_comments(self, user_id: UserId) -> int:
        pass

    @abstractmethod
    async def add_reply(self, user_id: UserId, comment: Comment) -> None:
        """Append a reply to the notification index of ``user_id``."""
        pass

    @abstractmethod
    async def reply_refs(
        self, user_id: UserId, start: int, count: int
    ) -> List[tuple[NewsId, CommentId]]:
        """References to replies received by a user, newest first."""
        pass
