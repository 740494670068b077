"""Unit tests for CommentService."""

import pytest

from lamer.domain.error import (
    ContentDeletedError,
    DuplicateVoteError,
    EditWindowExpiredError,
    InsufficientKarmaError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from lamer.domain.service import CommentService, NewsService, UserService
from lamer.domain.value import ROOT_COMMENT_ID, CommentId, CommentOp, NewsId, VoteType
from tests.conftest import freeze_time, register_user
from tests.harness import create_env_fixture

# Unit test fixture - fake Redis, nothing to run
unit_env = create_env_fixture()

NOW = 1_700_000_000


async def submit(env, user) -> NewsId:
    news_service = await env.get(NewsService)
    return await news_service.insert_news("Title", "https://example.com/", "", user.id)


async def comment_count(env, news_id: NewsId) -> int:
    news_service = await env.get(NewsService)
    news = await news_service.get_news_by_id(news_id)
    return news.comments


class TestInsertComment:
    """Tests for comment insertion."""

    @pytest.mark.asyncio
    async def test_first_comment(self, unit_env, monkeypatch):
        """First comment gets id 1 and bumps the news counter to 1."""
        # Arrange
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)

        # Act
        result = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "First!"
        )

        # Assert
        assert result.op == CommentOp.INSERT
        assert result.comment_id == 1
        assert await comment_count(unit_env, news_id) == 1
        comment = await comment_service.get_comment(news_id, CommentId(1))
        assert comment.body == "First!"
        assert comment.user_id == alice.id
        assert comment.created_at == NOW
        assert comment.is_root

    @pytest.mark.asyncio
    async def test_reply_notifies_parent_author(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        user_service = await unit_env.get(UserService)
        parent = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Parent"
        )

        reply = await comment_service.handle_comment(
            bob, news_id, ROOT_COMMENT_ID, parent.comment_id, "Reply"
        )

        alice = await user_service.get_user_by_id(alice.id)
        assert alice.replies == 1
        replies = await comment_service.get_replies(alice)
        assert [(c.news_id, c.id) for c in replies] == [(news_id, reply.comment_id)]
        alice = await user_service.get_user_by_id(alice.id)
        assert alice.replies == 0

    @pytest.mark.asyncio
    async def test_reply_to_own_comment_does_not_notify(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        user_service = await unit_env.get(UserService)
        parent = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Parent"
        )

        await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, parent.comment_id, "Me again"
        )

        alice = await user_service.get_user_by_id(alice.id)
        assert alice.replies == 0

    @pytest.mark.asyncio
    async def test_unknown_parent_raises(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.handle_comment(
                alice, news_id, ROOT_COMMENT_ID, CommentId(42), "Orphan"
            )

        assert await comment_count(unit_env, news_id) == 0

    @pytest.mark.asyncio
    async def test_missing_parent_id_raises(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(ValidationError):
            await comment_service.handle_comment(
                alice, news_id, ROOT_COMMENT_ID, None, "No parent"
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["", "x" * 4097])
    async def test_invalid_body_raises(self, unit_env, monkeypatch, body):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(ValidationError):
            await comment_service.handle_comment(
                alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, body
            )

    @pytest.mark.asyncio
    async def test_comment_on_missing_news_raises(self, unit_env):
        alice = await register_user(unit_env, "alice")
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.handle_comment(
                alice, NewsId(9), ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Hi"
            )


class TestUpdateAndDeleteComment:
    """Tests for editing, deleting and reviving comments."""

    @pytest.mark.asyncio
    async def test_update_body(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        inserted = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Typo"
        )

        result = await comment_service.handle_comment(
            alice, news_id, inserted.comment_id, ROOT_COMMENT_ID, "Fixed"
        )

        assert result.op == CommentOp.UPDATE
        comment = await comment_service.get_comment(news_id, inserted.comment_id)
        assert comment.body == "Fixed"
        assert await comment_count(unit_env, news_id) == 1

    @pytest.mark.asyncio
    async def test_delete_then_revive(self, unit_env, monkeypatch):
        """Deleting leaves a tombstone; editing it back restores the count."""
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        inserted = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Oops"
        )

        deleted = await comment_service.handle_comment(
            alice, news_id, inserted.comment_id, ROOT_COMMENT_ID, ""
        )

        assert deleted.op == CommentOp.DELETE
        tombstone = await comment_service.get_comment(news_id, inserted.comment_id)
        assert tombstone.deleted
        assert await comment_count(unit_env, news_id) == 0

        with pytest.raises(ContentDeletedError):
            await comment_service.handle_comment(
                alice, news_id, inserted.comment_id, ROOT_COMMENT_ID, None
            )

        revived = await comment_service.handle_comment(
            alice, news_id, inserted.comment_id, ROOT_COMMENT_ID, "Back"
        )

        assert revived.op == CommentOp.UPDATE
        comment = await comment_service.get_comment(news_id, inserted.comment_id)
        assert not comment.deleted
        assert comment.body == "Back"
        assert await comment_count(unit_env, news_id) == 1

    @pytest.mark.asyncio
    async def test_non_author_cannot_edit(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        inserted = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Mine"
        )

        with pytest.raises(NotAuthorizedError):
            await comment_service.handle_comment(
                bob, news_id, inserted.comment_id, ROOT_COMMENT_ID, "Hijack"
            )

    @pytest.mark.asyncio
    async def test_edit_after_window_raises(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        inserted = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Old"
        )
        freeze_time(monkeypatch, NOW + 7200)

        with pytest.raises(EditWindowExpiredError):
            await comment_service.handle_comment(
                alice, news_id, inserted.comment_id, ROOT_COMMENT_ID, "Too late"
            )

    @pytest.mark.asyncio
    async def test_edit_missing_comment_raises(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.handle_comment(
                alice, news_id, CommentId(5), ROOT_COMMENT_ID, "Ghost"
            )


class TestCommentThread:
    """Tests for thread loading and ordering."""

    @pytest.mark.asyncio
    async def test_thread_walk_depth_first(self, unit_env, monkeypatch):
        """Replies follow their parent; siblings newest first at equal score."""
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        freeze_time(monkeypatch, NOW)
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)

        first = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "first"
        )
        freeze_time(monkeypatch, NOW + 10)
        second = await comment_service.handle_comment(
            bob, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "second"
        )
        freeze_time(monkeypatch, NOW + 20)
        reply = await comment_service.handle_comment(
            bob, news_id, ROOT_COMMENT_ID, first.comment_id, "reply"
        )

        news_service = await unit_env.get(NewsService)
        news = await news_service.get_news_by_id(news_id)
        thread = await comment_service.get_news_comments(news)

        assert len(thread) == 3
        assert [(depth, c.id) for depth, c in thread.walk()] == [
            (0, second.comment_id),
            (0, first.comment_id),
            (1, reply.comment_id),
        ]
        assert thread.roots[1].user.username == "alice"
        nodes = thread.tree()
        assert [node.comment.id for node in nodes[1].replies] == [reply.comment_id]

    @pytest.mark.asyncio
    async def test_higher_score_sorts_first(self, unit_env, monkeypatch):
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        freeze_time(monkeypatch, NOW)
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        older = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "older"
        )
        freeze_time(monkeypatch, NOW + 10)
        await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "newer"
        )
        await comment_service.vote_comment(bob, news_id, older.comment_id, VoteType.UP)

        news_service = await unit_env.get(NewsService)
        thread = await comment_service.get_news_comments(
            await news_service.get_news_by_id(news_id)
        )

        assert thread.roots[0].id == older.comment_id


class TestVoteComment:
    """Tests for vote_comment method."""

    @pytest.mark.asyncio
    async def test_vote_once(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        inserted = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Vote me"
        )

        voted = await comment_service.vote_comment(
            bob, news_id, inserted.comment_id, "up"
        )

        assert voted.score == 1
        assert voted.up == [bob.id]
        with pytest.raises(DuplicateVoteError):
            await comment_service.vote_comment(
                bob, news_id, inserted.comment_id, VoteType.DOWN
            )

    @pytest.mark.asyncio
    async def test_downvote_requires_karma(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        inserted = await comment_service.handle_comment(
            alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, "Vote me"
        )

        with pytest.raises(InsufficientKarmaError):
            await comment_service.vote_comment(
                bob, news_id, inserted.comment_id, VoteType.DOWN
            )


class TestUserComments:
    """Tests for get_user_comments method."""

    @pytest.mark.asyncio
    async def test_user_comments_newest_first(self, unit_env, monkeypatch):
        alice = await register_user(unit_env, "alice")
        freeze_time(monkeypatch, NOW)
        news_id = await submit(unit_env, alice)
        comment_service = await unit_env.get(CommentService)
        user_service = await unit_env.get(UserService)
        for offset, body in enumerate(["one", "two", "three"]):
            freeze_time(monkeypatch, NOW + offset)
            await comment_service.handle_comment(
                alice, news_id, ROOT_COMMENT_ID, ROOT_COMMENT_ID, body
            )

        comments, total = await comment_service.get_user_comments(alice.id, count=2)

        assert [c.body for c in comments] == ["three", "two"]
        assert total == 3
        counters = await user_service.get_user_counters(alice.id)
        assert counters.posted_comments == 3
        assert counters.posted_news == 1
