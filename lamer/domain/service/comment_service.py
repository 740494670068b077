"""Comment domain service."""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

import logfire

from lamer.config import CommentSettings, KarmaSettings
from lamer.domain.error import (
    ContentDeletedError,
    DuplicateVoteError,
    EditWindowExpiredError,
    InsufficientKarmaError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from lamer.domain.model import Comment, News, User
from lamer.domain.repository import (
    CommentRepository,
    NewsRepository,
    UserRepository,
)
from lamer.domain.value import (
    ROOT_COMMENT_ID,
    CommentId,
    CommentOp,
    NewsId,
    UserId,
    VoteType,
)

from .base import Service
from .vote_service import parse_vote_type


@dataclass
class CommentOperation:
    """Outcome of a comment write."""

    news_id: NewsId
    comment_id: CommentId
    op: CommentOp


@dataclass
class CommentNode:
    """A comment and its direct replies."""

    comment: Comment
    replies: list["CommentNode"] = field(default_factory=list)


def _display_order(comment: Comment) -> tuple[int, int]:
    # Higher score first, then newer first
    return (-comment.score, -comment.created_at)


@dataclass
class CommentThread:
    """The comments of one news item, bucketed by parent id.

    Children only reference their parent by id. Each bucket is kept in
    display order, so walking from the root (-1) renders the thread.
    """

    news_id: NewsId
    by_parent: dict[CommentId, list[Comment]] = field(default_factory=dict)

    @classmethod
    def build(cls, news_id: NewsId, comments: list[Comment]) -> "CommentThread":
        buckets: dict[CommentId, list[Comment]] = defaultdict(list)
        for comment in comments:
            buckets[comment.parent_id].append(comment)
        for siblings in buckets.values():
            siblings.sort(key=_display_order)
        return cls(news_id=news_id, by_parent=dict(buckets))

    def children(self, parent_id: CommentId) -> list[Comment]:
        return self.by_parent.get(parent_id, [])

    @property
    def roots(self) -> list[Comment]:
        return self.children(ROOT_COMMENT_ID)

    def walk(self) -> Iterator[tuple[int, Comment]]:
        """Yield (depth, comment) depth-first in display order."""
        stack = [(0, comment) for comment in reversed(self.roots)]
        while stack:
            depth, comment = stack.pop()
            yield depth, comment
            stack.extend(
                (depth + 1, child) for child in reversed(self.children(comment.id))
            )

    def tree(self, parent_id: CommentId = ROOT_COMMENT_ID) -> list[CommentNode]:
        """Materialize the forest below ``parent_id`` as nested nodes."""
        return [
            CommentNode(comment=comment, replies=self.tree(comment.id))
            for comment in self.children(parent_id)
        ]

    def __len__(self) -> int:
        return sum(len(siblings) for siblings in self.by_parent.values())


class CommentService(Service):
    """Domain service for comment threads."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        news_repository: NewsRepository,
        user_repository: UserRepository,
        comment_settings: CommentSettings,
        karma_settings: KarmaSettings,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            news_repository: News repository (comment counters)
            user_repository: User repository (authors, reply notifications)
            comment_settings: Comment length and edit window
            karma_settings: Karma thresholds for comment votes
        """
        self.comment_repository = comment_repository
        self.news_repository = news_repository
        self.user_repository = user_repository
        self.comment_settings = comment_settings
        self.karma_settings = karma_settings

    def _validate_body(self, body: str) -> None:
        if len(body) > self.comment_settings.comment_max_length:
            raise ValidationError(
                f"Comment too long (max {self.comment_settings.comment_max_length})"
            )

    async def post_comment(
        self,
        news_id: NewsId,
        user_id: UserId,
        body: str,
        parent_id: Optional[CommentId],
    ) -> Comment:
        """Store a new comment in a thread.

        Args:
            news_id: News item owning the thread
            user_id: Author
            body: Comment text
            parent_id: Parent comment id, -1 for a top-level comment

        Returns:
            The stored comment with its newly allocated id

        Raises:
            ValidationError: If the parent id is missing
            NotFoundError: If the parent is not in this thread
        """
        if parent_id is None:
            raise ValidationError("Comment requires a parent id")

        if parent_id != ROOT_COMMENT_ID:
            if not await self.comment_repository.exists(news_id, parent_id):
                logfire.warn(
                    "Parent comment not found", news_id=news_id, parent_id=parent_id
                )
                raise NotFoundError("Comment", f"{news_id}-{parent_id}")

        comment_id = await self.comment_repository.next_id(news_id)
        comment = Comment(
            id=comment_id,
            news_id=news_id,
            parent_id=parent_id,
            user_id=user_id,
            body=body,
            created_at=self.now(),
        )
        return await self.comment_repository.save(comment)

    async def handle_comment(
        self,
        user: User,
        news_id: NewsId,
        comment_id: CommentId,
        parent_id: Optional[CommentId],
        body: Optional[str] = None,
    ) -> CommentOperation:
        """Insert, update or delete a comment.

        - ``comment_id == -1``: insert a new comment under ``parent_id``
        - existing comment with a body: update it, reviving a tombstone
        - existing comment without a body: soft-delete it

        Updates and deletes are allowed only to the author and only within
        ``comment_edit_time`` seconds of posting. Every check runs before
        the first write.

        Returns:
            The operation performed

        Raises:
            NotFoundError: If the news item or comment does not exist
            ValidationError: If the body is invalid or the parent id missing
            NotAuthorizedError: If the user is not the author
            EditWindowExpiredError: If the edit window has passed
            ContentDeletedError: If the news item or comment is already deleted
        """
        with logfire.span(
            "comment_service.handle_comment",
            news_id=news_id,
            comment_id=comment_id,
            user_id=user.id,
        ):
            news = await self.news_repository.find_by_id(news_id)
            if not news:
                raise NotFoundError("News", str(news_id))

            if comment_id == ROOT_COMMENT_ID:
                return await self._insert(user, news, parent_id, body)

            comment = await self.comment_repository.find(news_id, comment_id)
            if not comment:
                raise NotFoundError("Comment", f"{news_id}-{comment_id}")
            if comment.user_id != user.id:
                logfire.warn(
                    "Unauthorized comment edit attempt",
                    news_id=news_id,
                    comment_id=comment_id,
                    user_id=user.id,
                )
                raise NotAuthorizedError("Comment", comment.ref, str(user.id))
            if comment.created_at <= self.now() - self.comment_settings.comment_edit_time:
                raise EditWindowExpiredError("Comment", comment.ref)

            if not body:
                if comment.deleted:
                    raise ContentDeletedError("Comment", comment.ref)
                await self.delete_comment(news_id, comment_id)
                await self.news_repository.increment_comments(news_id, -1)
                logfire.info("Comment deleted", news_id=news_id, comment_id=comment_id)
                return CommentOperation(news_id, comment_id, CommentOp.DELETE)

            self._validate_body(body)
            updates: dict[str, object] = {"body": body}
            if comment.deleted:
                updates["deleted"] = False
            await self.edit_comment(news_id, comment_id, updates)
            if comment.deleted:
                await self.news_repository.increment_comments(news_id, 1)

            logfire.info(
                "Comment updated",
                news_id=news_id,
                comment_id=comment_id,
                revived=comment.deleted,
            )
            return CommentOperation(news_id, comment_id, CommentOp.UPDATE)

    async def _insert(
        self,
        user: User,
        news: News,
        parent_id: Optional[CommentId],
        body: Optional[str],
    ) -> CommentOperation:
        if news.deleted:
            raise ContentDeletedError("News", str(news.id))
        if not body:
            raise ValidationError("Comment body is required")
        self._validate_body(body)

        comment = await self.post_comment(news.id, user.id, body, parent_id)
        await self.news_repository.increment_comments(news.id, 1)
        await self.comment_repository.add_user_comment(user.id, comment)

        if not comment.is_root:
            parent = await self.comment_repository.find(news.id, comment.parent_id)
            if parent and parent.user_id != user.id:
                await self.user_repository.increment_replies(parent.user_id)
                await self.comment_repository.add_reply(parent.user_id, comment)

        logfire.info(
            "Comment inserted",
            news_id=news.id,
            comment_id=comment.id,
            parent_id=comment.parent_id,
            user_id=user.id,
        )
        return CommentOperation(news.id, comment.id, CommentOp.INSERT)

    async def get_news_comments(self, news: News) -> CommentThread:
        """Load the whole comment thread of a news item.

        Each comment is annotated with its author, loaded once per distinct
        author.
        """
        with logfire.span("comment_service.get_news_comments", news_id=news.id):
            comments = await self.comment_repository.find_thread(news.id)

            authors: dict[UserId, Optional[User]] = {}
            annotated = []
            for comment in comments:
                if comment.user_id not in authors:
                    authors[comment.user_id] = await self.user_repository.find_by_id(
                        comment.user_id
                    )
                annotated.append(
                    comment.model_copy(update={"user": authors[comment.user_id]})
                )

            return CommentThread.build(news.id, annotated)

    async def get_comment(
        self, news_id: NewsId, comment_id: CommentId
    ) -> Optional[Comment]:
        """Get a comment, tombstones included.

        Returns:
            Comment if found, None otherwise
        """
        return await self.comment_repository.find(news_id, comment_id)

    async def edit_comment(
        self,
        news_id: NewsId,
        comment_id: CommentId,
        updates: dict[str, object],
    ) -> Comment:
        """Merge field updates into a stored comment.

        Raises:
            NotFoundError: If the comment does not exist
        """
        comment = await self.comment_repository.update(news_id, comment_id, updates)
        if not comment:
            raise NotFoundError("Comment", f"{news_id}-{comment_id}")
        return comment

    async def delete_comment(self, news_id: NewsId, comment_id: CommentId) -> Comment:
        """Tombstone a comment; it stays a valid parent for its replies."""
        return await self.edit_comment(news_id, comment_id, {"deleted": True})

    async def vote_comment(
        self,
        user: User,
        news_id: NewsId,
        comment_id: CommentId,
        vote_type: Union[VoteType, str],
    ) -> Comment:
        """Vote a comment up or down, once per user.

        Raises:
            ValidationError: If the vote type is invalid
            NotFoundError: If the comment does not exist
            ContentDeletedError: If the comment was deleted
            DuplicateVoteError: If the user already voted it
            InsufficientKarmaError: If the user lacks the karma to vote
        """
        vote_type = parse_vote_type(vote_type)

        with logfire.span(
            "comment_service.vote_comment",
            news_id=news_id,
            comment_id=comment_id,
            user_id=user.id,
            type=vote_type.value,
        ):
            comment = await self.comment_repository.find(news_id, comment_id)
            if not comment:
                raise NotFoundError("Comment", f"{news_id}-{comment_id}")
            if comment.deleted:
                raise ContentDeletedError("Comment", comment.ref)
            if user.id in comment.up or user.id in comment.down:
                raise DuplicateVoteError(f"User {user.id} already voted {comment.ref}")

            if comment.user_id != user.id:
                if vote_type == VoteType.UP:
                    required = self.karma_settings.comment_upvote_min_karma
                else:
                    required = self.karma_settings.comment_downvote_min_karma
                if user.karma < required:
                    raise InsufficientKarmaError(
                        f"You need {required} karma to {vote_type.value}vote comments"
                    )

            voted = await self.comment_repository.add_vote(
                news_id, comment_id, user.id, vote_type
            )
            if not voted:
                raise DuplicateVoteError(f"User {user.id} already voted {comment.ref}")

            logfire.info(
                "Comment voted", comment=comment.ref, user_id=user.id, score=voted.score
            )
            return voted

    async def get_user_comments(
        self, user_id: UserId, start: int = 0, count: Optional[int] = None
    ) -> tuple[list[Comment], int]:
        """Read a page of a user's comments, newest first.

        Returns:
            Tuple of (comment page, total comment count)
        """
        count = count or self.comment_settings.user_comments_per_page
        refs = await self.comment_repository.user_comment_refs(user_id, start, count)
        comments = await self.comment_repository.find_by_refs(refs)
        return comments, await self.comment_repository.count_user_comments(user_id)

    async def get_replies(
        self, user: User, count: Optional[int] = None, reset: bool = True
    ) -> list[Comment]:
        """Read the latest replies to a user's comments.

        Args:
            user: User whose replies to read
            count: Page size
            reset: Mark the replies as read
        """
        count = count or self.comment_settings.replies_per_page
        refs = await self.comment_repository.reply_refs(user.id, 0, count)
        replies = await self.comment_repository.find_by_refs(refs)
        if reset and user.replies:
            await self.user_repository.reset_replies(user.id)
        return replies
