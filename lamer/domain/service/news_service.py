"""News domain service."""

from typing import Optional, Sequence

import logfire

from lamer.config import CommentSettings, NewsSettings
from lamer.domain.error import (
    ContentDeletedError,
    EditWindowExpiredError,
    NotAuthorizedError,
    NotFoundError,
    UrlAlreadySubmittedError,
)
from lamer.domain.model import News, User
from lamer.domain.repository import NewsRepository, UserRepository, VoteRepository
from lamer.domain.value import NewsId, UserId, VoteType, text_url

from .base import Service
from .ranking_service import RankingService
from .vote_service import VoteService


class NewsService(Service):
    """Domain service for news submission, editing and listings."""

    def __init__(
        self,
        news_repository: NewsRepository,
        vote_repository: VoteRepository,
        user_repository: UserRepository,
        ranking_service: RankingService,
        vote_service: VoteService,
        news_settings: NewsSettings,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize news service.

        Args:
            news_repository: News repository
            vote_repository: Vote repository (per-user vote annotation)
            user_repository: User repository (author usernames)
            ranking_service: Ranking domain service
            vote_service: Vote domain service (author's automatic upvote)
            news_settings: Submission and listing settings
            comment_settings: Comment settings (text post length)
        """
        self.news_repository = news_repository
        self.vote_repository = vote_repository
        self.user_repository = user_repository
        self.ranking_service = ranking_service
        self.vote_service = vote_service
        self.news_settings = news_settings
        self.comment_settings = comment_settings

    def _normalize_url(self, url: str, text: str) -> tuple[str, bool]:
        """Return the URL to store and whether this is a text post."""
        if not url:
            return text_url(text, self.comment_settings.comment_max_length), True
        return url, False

    async def _lock_url(self, url: str, news_id: NewsId) -> Optional[NewsId]:
        """Lock ``url`` for ``news_id``.

        Returns None once the lock is held, or the id of the submission
        that holds it. A lock that expires between the failed SET NX and
        the lookup is retried once.

        Raises:
            UrlAlreadySubmittedError: If the lock can be neither taken nor
                attributed to a submission
        """
        for _ in range(2):
            locked = await self.news_repository.lock_url(
                url, news_id, self.news_settings.prevent_repost_time
            )
            if locked:
                return None

            winner_id = await self.news_repository.find_id_by_url(url)
            if winner_id:
                return winner_id

        raise UrlAlreadySubmittedError(url)

    async def insert_news(
        self, title: str, url: str, text: str, user_id: UserId
    ) -> NewsId:
        """Submit a news item.

        A link already submitted within the repost window is not inserted
        again: the id of the existing item is returned instead.

        The new item is upvoted by its author, indexed in the author's
        posted list and both global views, and the author gets a
        submission cool-down.

        Args:
            title: News title
            url: Link, empty for a text post
            text: Body of a text post (ignored for link posts)
            user_id: Submitting user ID

        Returns:
            ID of the created (or already submitted) news item

        Raises:
            NotFoundError: If the user does not exist
        """
        url, text_post = self._normalize_url(url, text)

        with logfire.span(
            "news_service.insert_news", user_id=user_id, text_post=text_post
        ):
            author = await self.user_repository.find_by_id(user_id)
            if not author:
                raise NotFoundError("User", str(user_id))

            if not text_post:
                existing_id = await self.news_repository.find_id_by_url(url)
                if existing_id:
                    logfire.info("Repost suppressed", url=url, news_id=existing_id)
                    return existing_id

            news_id = await self.news_repository.next_id()

            if not text_post:
                winner_id = await self._lock_url(url, news_id)
                if winner_id:
                    logfire.info(
                        "Repost suppressed after race", url=url, news_id=winner_id
                    )
                    return winner_id

            news = News(
                id=news_id,
                title=title,
                url=url,
                user_id=user_id,
                created_at=self.now(),
            )
            await self.news_repository.save(news)

            rank = await self.vote_service.vote_news(news_id, user_id, VoteType.UP)
            await self.news_repository.add_to_indexes(
                news.model_copy(update={"rank": rank})
            )
            await self.news_repository.mark_submitted(
                user_id, self.news_settings.news_submission_break
            )

            logfire.info("News inserted", news_id=news_id, user_id=user_id, rank=rank)
            return news_id

    async def _get_editable_news(self, user: User, news_id: NewsId) -> News:
        news = await self.news_repository.find_by_id(news_id)
        if not news:
            raise NotFoundError("News", str(news_id))
        if news.deleted:
            raise ContentDeletedError("News", str(news_id))
        if news.user_id != user.id:
            logfire.warn(
                "Unauthorized news edit attempt", news_id=news_id, user_id=user.id
            )
            raise NotAuthorizedError("News", str(news_id), str(user.id))
        if news.created_at <= self.now() - self.news_settings.news_edit_time:
            raise EditWindowExpiredError("News", str(news_id))
        return news

    async def edit_news(
        self, user: User, news_id: NewsId, title: str, url: str, text: str
    ) -> NewsId:
        """Edit a news item.

        Only the owner may edit, and only within ``news_edit_time`` seconds
        of submission. Moving a link post to a new URL locks the new URL
        for the repost window and releases the old one.

        Returns:
            ID of the edited news item

        Raises:
            NotFoundError: If the news item does not exist
            ContentDeletedError: If the news item was deleted
            NotAuthorizedError: If the user is not the owner
            EditWindowExpiredError: If the edit window has passed
            UrlAlreadySubmittedError: If the new URL was submitted recently
        """
        with logfire.span("news_service.edit_news", news_id=news_id, user_id=user.id):
            news = await self._get_editable_news(user, news_id)
            url, text_post = self._normalize_url(url, text)

            if not text_post and url != news.url:
                if await self.news_repository.find_id_by_url(url):
                    raise UrlAlreadySubmittedError(url)
                if not await self.news_repository.lock_url(
                    url, news_id, self.news_settings.prevent_repost_time
                ):
                    raise UrlAlreadySubmittedError(url)
                if not news.is_text_post:
                    await self.news_repository.release_url(news.url)

            await self.news_repository.update_content(news_id, title, url)
            logfire.info("News edited", news_id=news_id, user_id=user.id)
            return news_id

    async def delete_news(self, user: User, news_id: NewsId) -> None:
        """Delete a news item.

        Same ownership and time window rules as editing. The record stays
        (flagged as deleted) but leaves the top and latest views.
        """
        with logfire.span(
            "news_service.delete_news", news_id=news_id, user_id=user.id
        ):
            await self._get_editable_news(user, news_id)
            await self.news_repository.mark_deleted(news_id)
            logfire.info("News deleted", news_id=news_id, user_id=user.id)

    async def get_news_by_id(
        self,
        news_id: NewsId,
        user: Optional[User] = None,
        update_rank: bool = False,
    ) -> Optional[News]:
        """Get a single news item.

        Returns:
            The annotated news item if found, None otherwise
        """
        result = await self.get_news_batch([news_id], user, update_rank)
        return result[0] if result else None

    async def get_news_batch(
        self,
        news_ids: Sequence[NewsId],
        user: Optional[User] = None,
        update_rank: bool = False,
    ) -> list[News]:
        """Load several news items, annotated for display.

        Each item gets its author's username and, when a user is given,
        that user's vote. Missing ids are skipped.

        Args:
            news_ids: IDs to load, in display order
            user: Viewing user, None for anonymous
            update_rank: Reconcile cached ranks while loading
        """
        items = await self.news_repository.find_many(news_ids)
        if not items:
            return []

        if update_rank:
            items = await self.ranking_service.refresh_ranks(items)

        usernames = await self.user_repository.find_usernames(
            [news.user_id for news in items]
        )
        votes = {}
        if user:
            votes = await self.vote_repository.find_votes(
                [news.id for news in items], user.id
            )

        return [
            news.model_copy(update={"username": username, "voted": votes.get(news.id)})
            for news, username in zip(items, usernames)
        ]

    async def get_top_news(
        self,
        user: Optional[User] = None,
        start: int = 0,
        count: Optional[int] = None,
    ) -> list[News]:
        """Read a page of the top view, sorted by reconciled rank."""
        with logfire.span("news_service.get_top_news", start=start):
            count = count or self.news_settings.top_news_per_page
            news_ids = await self.news_repository.top_ids(start, count)
            items = await self.get_news_batch(news_ids, user, update_rank=True)
            # Refreshing may have reordered the cached ranks
            return sorted(items, key=lambda news: news.rank, reverse=True)

    async def get_latest_news(
        self,
        user: Optional[User] = None,
        start: int = 0,
        count: Optional[int] = None,
    ) -> list[News]:
        """Read a page of the chronological view, newest first."""
        with logfire.span("news_service.get_latest_news", start=start):
            count = count or self.news_settings.latest_news_per_page
            news_ids = await self.news_repository.latest_ids(start, count)
            return await self.get_news_batch(news_ids, user, update_rank=True)

    async def get_saved_news(
        self, user: User, start: int = 0
    ) -> tuple[list[News], int]:
        """Read a page of the news a user upvoted.

        Returns:
            Tuple of (news page, total saved count)
        """
        news_ids = await self.news_repository.saved_ids(
            user.id, start, self.news_settings.saved_news_per_page
        )
        news = await self.get_news_batch(news_ids, user)
        return news, await self.news_repository.count_saved(user.id)

    async def get_posted_news(
        self,
        user_id: UserId,
        start: int = 0,
        count: Optional[int] = None,
        viewer: Optional[User] = None,
    ) -> tuple[list[News], int]:
        """Read a page of the news a user submitted.

        Returns:
            Tuple of (news page, total posted count)
        """
        count = count or self.news_settings.latest_news_per_page
        news_ids = await self.news_repository.posted_ids(user_id, start, count)
        news = await self.get_news_batch(news_ids, viewer)
        return news, await self.news_repository.count_posted(user_id)

    async def get_new_post_eta(self, user: User) -> int:
        """Seconds until the user may submit again, 0 if allowed now."""
        return max(await self.news_repository.submission_ttl(user.id), 0)
