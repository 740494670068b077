"""Unit tests for NewsService."""

import pytest
from redis.asyncio import Redis

from lamer.domain.error import (
    ContentDeletedError,
    EditWindowExpiredError,
    NotAuthorizedError,
    NotFoundError,
    UrlAlreadySubmittedError,
)
from lamer.domain.repository import NewsRepository
from lamer.domain.service import NewsService, UserService, VoteService
from lamer.domain.value import NewsId, VoteType
from tests.conftest import freeze_time, register_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()

NOW = 1_700_000_000
URL = "https://example.com/article"


class TestInsertNews:
    """Tests for insert_news method."""

    @pytest.mark.asyncio
    async def test_insert_link_news(self, unit_env, monkeypatch):
        """A new item is self-upvoted and present in every index."""
        # Arrange
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        news_repository = await unit_env.get(NewsRepository)

        # Act
        news_id = await news_service.insert_news("Hello", URL, "", user.id)

        # Assert
        news = await news_service.get_news_by_id(news_id, user)
        assert news_id == 1
        assert news.title == "Hello"
        assert news.url == URL
        assert news.domain == "example.com"
        assert news.up == 1
        assert news.score == 1.0
        assert news.rank == pytest.approx(1000 / 600)
        assert news.username == "alice"
        assert news.voted == VoteType.UP
        assert await news_repository.top_ids(0, 10) == [news_id]
        assert await news_repository.latest_ids(0, 10) == [news_id]
        assert await news_repository.posted_ids(user.id, 0, 10) == [news_id]
        assert await news_repository.saved_ids(user.id, 0, 10) == [news_id]

    @pytest.mark.asyncio
    async def test_self_upvote_costs_no_karma(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        user_service = await unit_env.get(UserService)

        await news_service.insert_news("Hello", URL, "", user.id)

        assert await user_service.get_user_karma(user.id) == 10

    @pytest.mark.asyncio
    async def test_insert_text_news(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)

        news_id = await news_service.insert_news("Ask", "", "What do you use?", user.id)

        news = await news_service.get_news_by_id(news_id)
        assert news.url == "text://What do you use?"
        assert news.is_text_post
        assert news.text == "What do you use?"
        assert news.domain is None
        assert news.voted is None

    @pytest.mark.asyncio
    async def test_repost_returns_existing_id(self, unit_env, monkeypatch):
        """Submitting a locked URL again does not allocate a new item."""
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        news_service = await unit_env.get(NewsService)
        redis = await unit_env.get(Redis)

        first = await news_service.insert_news("Hello", URL, "", alice.id)
        second = await news_service.insert_news("Hello again", URL, "", bob.id)

        assert second == first
        assert await redis.get("news.count") == "1"
        assert int(await redis.get(f"url:{URL}")) == first

    @pytest.mark.asyncio
    async def test_resubmit_after_repost_window_creates_new_item(
        self, unit_env, monkeypatch
    ):
        """Once the URL lock is gone the same link is a new item."""
        # Arrange
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        news_service = await unit_env.get(NewsService)
        redis = await unit_env.get(Redis)
        first = await news_service.insert_news("Hello", URL, "", alice.id)
        # the lock's TTL ran out
        await redis.delete(f"url:{URL}")

        # Act
        second = await news_service.insert_news("Hello again", URL, "", bob.id)

        # Assert
        assert second != first
        assert await redis.get("news.count") == "2"
        assert int(await redis.get(f"url:{URL}")) == second

    @pytest.mark.asyncio
    async def test_unknown_user_writes_nothing(self, unit_env, monkeypatch):
        """Submitting as a missing user leaves no item, counter or lock."""
        freeze_time(monkeypatch, NOW)
        news_service = await unit_env.get(NewsService)
        redis = await unit_env.get(Redis)

        with pytest.raises(NotFoundError):
            await news_service.insert_news("Hello", URL, "", 42)

        assert await redis.get("news.count") is None
        assert await redis.hgetall("news:1") == {}
        assert await redis.get(f"url:{URL}") is None
        assert await redis.zcard("news.cron") == 0

    @pytest.mark.asyncio
    async def test_lock_retried_when_holder_vanishes(self, unit_env, monkeypatch):
        """A lock that expires between SET NX and the lookup is taken again."""
        # Arrange
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        redis = await unit_env.get(Redis)
        repository = news_service.news_repository
        lock_url = repository.lock_url
        attempts = []

        async def lock_after_first_attempt(url, news_id, ttl):
            attempts.append(news_id)
            if len(attempts) == 1:
                return False
            return await lock_url(url, news_id, ttl)

        monkeypatch.setattr(repository, "lock_url", lock_after_first_attempt)

        # Act
        news_id = await news_service.insert_news("Hello", URL, "", user.id)

        # Assert
        assert attempts == [news_id, news_id]
        assert int(await redis.get(f"url:{URL}")) == news_id
        assert await redis.hget(f"news:{news_id}", "url") == URL

    @pytest.mark.asyncio
    async def test_unattributable_lock_is_not_bypassed(self, unit_env, monkeypatch):
        """An insert never proceeds without holding the URL lock."""
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        redis = await unit_env.get(Redis)

        async def never_locks(url, news_id, ttl):
            return False

        monkeypatch.setattr(news_service.news_repository, "lock_url", never_locks)

        with pytest.raises(UrlAlreadySubmittedError):
            await news_service.insert_news("Hello", URL, "", user.id)

        assert await redis.hgetall("news:1") == {}
        assert await redis.zcard("news.cron") == 0

    @pytest.mark.asyncio
    async def test_text_posts_are_never_deduplicated(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)

        first = await news_service.insert_news("Ask", "", "Same body", user.id)
        second = await news_service.insert_news("Ask", "", "Same body", user.id)

        assert first != second

    @pytest.mark.asyncio
    async def test_insert_arms_submission_cooldown(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        assert await news_service.get_new_post_eta(user) == 0

        await news_service.insert_news("Hello", URL, "", user.id)

        assert 0 < await news_service.get_new_post_eta(user) <= 900


class TestEditNews:
    """Tests for edit_news method."""

    @pytest.mark.asyncio
    async def test_owner_edits_title_and_url(self, unit_env, monkeypatch):
        """Moving to a new URL locks it and releases the old one."""
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        news_repository = await unit_env.get(NewsRepository)
        news_id = await news_service.insert_news("Hello", URL, "", user.id)

        await news_service.edit_news(user, news_id, "Better", URL + "/v2", "")

        news = await news_service.get_news_by_id(news_id)
        assert news.title == "Better"
        assert news.url == URL + "/v2"
        assert await news_repository.find_id_by_url(URL + "/v2") == news_id
        assert await news_repository.find_id_by_url(URL) is None

    @pytest.mark.asyncio
    async def test_edit_to_submitted_url_raises(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        await news_service.insert_news("Taken", URL + "/taken", "", user.id)
        news_id = await news_service.insert_news("Hello", URL, "", user.id)

        with pytest.raises(UrlAlreadySubmittedError):
            await news_service.edit_news(user, news_id, "Hello", URL + "/taken", "")

    @pytest.mark.asyncio
    async def test_non_owner_cannot_edit(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        news_service = await unit_env.get(NewsService)
        news_id = await news_service.insert_news("Hello", URL, "", alice.id)

        with pytest.raises(NotAuthorizedError):
            await news_service.edit_news(bob, news_id, "Mine now", URL, "")

    @pytest.mark.asyncio
    async def test_edit_after_window_raises(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        news_id = await news_service.insert_news("Hello", URL, "", user.id)
        freeze_time(monkeypatch, NOW + 900)

        with pytest.raises(EditWindowExpiredError):
            await news_service.edit_news(user, news_id, "Late", URL, "")

    @pytest.mark.asyncio
    async def test_edit_missing_news_raises(self, unit_env):
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)

        with pytest.raises(NotFoundError):
            await news_service.edit_news(user, NewsId(77), "Title", URL, "")


class TestDeleteNews:
    """Tests for delete_news method."""

    @pytest.mark.asyncio
    async def test_delete_removes_from_views(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        news_id = await news_service.insert_news("Hello", URL, "", user.id)

        await news_service.delete_news(user, news_id)

        news = await news_service.get_news_by_id(news_id)
        assert news.deleted
        assert await news_service.get_top_news() == []
        assert await news_service.get_latest_news() == []

    @pytest.mark.asyncio
    async def test_delete_twice_raises(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        news_id = await news_service.insert_news("Hello", URL, "", user.id)
        await news_service.delete_news(user, news_id)

        with pytest.raises(ContentDeletedError):
            await news_service.delete_news(user, news_id)


class TestListings:
    """Tests for the news listings."""

    @pytest.mark.asyncio
    async def test_top_news_sorted_by_reconciled_rank(self, unit_env, monkeypatch):
        """Older items decay, so a newer item with the same score ranks first."""
        alice = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        freeze_time(monkeypatch, NOW)
        old_id = await news_service.insert_news("Old", "", "old", alice.id)
        freeze_time(monkeypatch, NOW + 3600)
        new_id = await news_service.insert_news("New", "", "new", alice.id)

        top = await news_service.get_top_news(alice)

        assert [news.id for news in top] == [new_id, old_id]
        assert top[0].rank > top[1].rank

    @pytest.mark.asyncio
    async def test_latest_news_newest_first(self, unit_env, monkeypatch):
        alice = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        ids = []
        for offset in range(3):
            freeze_time(monkeypatch, NOW + offset)
            ids.append(
                await news_service.insert_news(f"N{offset}", "", f"b{offset}", alice.id)
            )

        latest = await news_service.get_latest_news(count=2)

        assert [news.id for news in latest] == [ids[2], ids[1]]

    @pytest.mark.asyncio
    async def test_saved_and_posted_news(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        alice = await register_user(unit_env, "alice")
        bob = await register_user(unit_env, "bob")
        news_service = await unit_env.get(NewsService)
        news_id = await news_service.insert_news("Hello", URL, "", alice.id)
        vote_service = await unit_env.get(VoteService)
        await vote_service.vote_news(news_id, bob.id, VoteType.UP)

        saved, saved_count = await news_service.get_saved_news(bob)
        posted, posted_count = await news_service.get_posted_news(alice.id)

        assert [news.id for news in saved] == [news_id]
        assert saved[0].voted == VoteType.UP
        assert saved_count == 1
        assert [news.id for news in posted] == [news_id]
        assert posted_count == 1

    @pytest.mark.asyncio
    async def test_missing_ids_are_skipped(self, unit_env, monkeypatch):
        freeze_time(monkeypatch, NOW)
        user = await register_user(unit_env, "alice")
        news_service = await unit_env.get(NewsService)
        news_id = await news_service.insert_news("Hello", URL, "", user.id)

        batch = await news_service.get_news_batch([NewsId(99), news_id])

        assert [news.id for news in batch] == [news_id]
        assert await news_service.get_news_by_id(NewsId(99)) is None
