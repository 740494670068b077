"""Application layer DI providers."""

from dishka import Scope, provide

from lamer.application.usecase.account import (
    AuthenticateUseCase,
    CreateAccountUseCase,
    LoginUseCase,
    LogoutUseCase,
)
from lamer.application.usecase.comment import GetCommentsUseCase, HandleCommentUseCase
from lamer.application.usecase.news import (
    ListNewsUseCase,
    SubmitNewsUseCase,
    VoteNewsUseCase,
)
from lamer.config import AuthSettings, CommentSettings, KarmaSettings, NewsSettings
from lamer.domain.service import (
    CommentService,
    NewsService,
    RateLimitService,
    UserService,
    VoteService,
)
from lamer.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Account use cases
    @provide
    def get_create_account_use_case(
        self,
        user_service: UserService,
        rate_limit_service: RateLimitService,
        auth_settings: AuthSettings,
    ) -> CreateAccountUseCase:
        """Provide create account use case."""
        return CreateAccountUseCase(
            user_service=user_service,
            rate_limit_service=rate_limit_service,
            auth_settings=auth_settings,
        )

    @provide
    def get_login_use_case(self, user_service: UserService) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(user_service=user_service)

    @provide
    def get_authenticate_use_case(
        self, user_service: UserService, karma_settings: KarmaSettings
    ) -> AuthenticateUseCase:
        """Provide authenticate use case."""
        return AuthenticateUseCase(
            user_service=user_service, karma_settings=karma_settings
        )

    @provide
    def get_logout_use_case(self, user_service: UserService) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(user_service=user_service)

    # News use cases
    @provide
    def get_submit_news_use_case(
        self,
        news_service: NewsService,
        user_service: UserService,
        news_settings: NewsSettings,
        comment_settings: CommentSettings,
    ) -> SubmitNewsUseCase:
        """Provide submit news use case."""
        return SubmitNewsUseCase(
            news_service=news_service,
            user_service=user_service,
            news_settings=news_settings,
            comment_settings=comment_settings,
        )

    @provide
    def get_list_news_use_case(
        self, news_service: NewsService, user_service: UserService
    ) -> ListNewsUseCase:
        """Provide list news use case."""
        return ListNewsUseCase(news_service=news_service, user_service=user_service)

    @provide
    def get_vote_news_use_case(
        self, vote_service: VoteService, user_service: UserService
    ) -> VoteNewsUseCase:
        """Provide vote news use case."""
        return VoteNewsUseCase(vote_service=vote_service, user_service=user_service)

    # Comment use cases
    @provide
    def get_handle_comment_use_case(
        self, comment_service: CommentService, user_service: UserService
    ) -> HandleCommentUseCase:
        """Provide handle comment use case."""
        return HandleCommentUseCase(
            comment_service=comment_service, user_service=user_service
        )

    @provide
    def get_comments_use_case(
        self,
        comment_service: CommentService,
        news_service: NewsService,
        user_service: UserService,
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(
            comment_service=comment_service,
            news_service=news_service,
            user_service=user_service,
        )
