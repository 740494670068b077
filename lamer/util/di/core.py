"""Core DI providers (non-mockable)."""

from typing import Optional

from dishka import Scope, provide

from lamer.config import (
    AuthSettings,
    CommentSettings,
    KarmaSettings,
    NewsSettings,
    RankingSettings,
    Settings,
)
from lamer.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file unless an
    instance is passed in. Services depend on the option groups they use,
    not on Settings.
    """

    scope = Scope.APP

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self._settings = settings

    @provide
    def provide_settings(self) -> Settings:
        """Provide the given settings, or load them from environment."""
        return self._settings or Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide
    def provide_karma_settings(self, settings: Settings) -> KarmaSettings:
        return settings.karma

    @provide
    def provide_ranking_settings(self, settings: Settings) -> RankingSettings:
        return settings.ranking

    @provide
    def provide_news_settings(self, settings: Settings) -> NewsSettings:
        return settings.news

    @provide
    def provide_comment_settings(self, settings: Settings) -> CommentSettings:
        return settings.comments
