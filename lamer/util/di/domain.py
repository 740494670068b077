"""Domain layer DI providers."""

from dishka import Scope, provide

from lamer.config import (
    AuthSettings,
    CommentSettings,
    KarmaSettings,
    NewsSettings,
    RankingSettings,
)
from lamer.domain.repository import (
    CommentRepository,
    NewsRepository,
    RateLimitRepository,
    UserRepository,
    VoteRepository,
)
from lamer.domain.service import (
    CommentService,
    NewsService,
    PasswordService,
    RankingService,
    RateLimitService,
    UserService,
    VoteService,
)
from lamer.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with the repository lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_password_service(self, auth_settings: AuthSettings) -> PasswordService:
        """Provide password hashing domain service."""
        return PasswordService(auth_settings=auth_settings)

    @provide
    def get_user_service(
        self,
        user_repository: UserRepository,
        news_repository: NewsRepository,
        comment_repository: CommentRepository,
        password_service: PasswordService,
        auth_settings: AuthSettings,
        karma_settings: KarmaSettings,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            news_repository=news_repository,
            comment_repository=comment_repository,
            password_service=password_service,
            auth_settings=auth_settings,
            karma_settings=karma_settings,
        )

    @provide
    def get_ranking_service(
        self,
        news_repository: NewsRepository,
        vote_repository: VoteRepository,
        ranking_settings: RankingSettings,
    ) -> RankingService:
        """Provide ranking domain service."""
        return RankingService(
            news_repository=news_repository,
            vote_repository=vote_repository,
            ranking_settings=ranking_settings,
        )

    @provide
    def get_vote_service(
        self,
        vote_repository: VoteRepository,
        news_repository: NewsRepository,
        user_service: UserService,
        ranking_service: RankingService,
        karma_settings: KarmaSettings,
    ) -> VoteService:
        """Provide vote domain service."""
        return VoteService(
            vote_repository=vote_repository,
            news_repository=news_repository,
            user_service=user_service,
            ranking_service=ranking_service,
            karma_settings=karma_settings,
        )

    @provide
    def get_news_service(
        self,
        news_repository: NewsRepository,
        vote_repository: VoteRepository,
        user_repository: UserRepository,
        ranking_service: RankingService,
        vote_service: VoteService,
        news_settings: NewsSettings,
        comment_settings: CommentSettings,
    ) -> NewsService:
        """Provide news domain service."""
        return NewsService(
            news_repository=news_repository,
            vote_repository=vote_repository,
            user_repository=user_repository,
            ranking_service=ranking_service,
            vote_service=vote_service,
            news_settings=news_settings,
            comment_settings=comment_settings,
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        news_repository: NewsRepository,
        user_repository: UserRepository,
        comment_settings: CommentSettings,
        karma_settings: KarmaSettings,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            news_repository=news_repository,
            user_repository=user_repository,
            comment_settings=comment_settings,
            karma_settings=karma_settings,
        )

    @provide
    def get_rate_limit_service(
        self, rate_limit_repository: RateLimitRepository
    ) -> RateLimitService:
        """Provide rate limit domain service."""
        return RateLimitService(rate_limit_repository=rate_limit_repository)
