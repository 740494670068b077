"""Application configuration."""

from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseModel):
    """Redis store configuration."""

    url: str = "redis://localhost:6379/0"
    socket_timeout: float | None = 5.0
    max_connections: int = 50


class AuthSettings(BaseModel):
    """Credential and account configuration."""

    password_min_length: int = 8

    # PBKDF2 parameters used to derive stored password hashes
    pbkdf2_iterations: int = 1000
    pbkdf2_key_length: int = 20  # bytes (160 bit)
    pbkdf2_algorithm: str = "sha1"

    # Random bytes for auth tokens, API secrets and salts (hex encoded)
    token_bytes: int = 20

    # Only one account per client tag within this window
    account_creation_delay: int = 3600 * 15


class KarmaSettings(BaseModel):
    """Karma accrual and vote cost configuration."""

    starting_karma: int = 10

    # "Karma grows while browsing": +amount at most once per interval
    increment_interval: int = 3600 * 3
    increment_amount: int = 1

    # Voting on someone else's news
    news_upvote_min_karma: int = 0
    news_downvote_min_karma: int = 30
    news_upvote_karma_cost: int = 1
    news_downvote_karma_cost: int = 6
    news_upvote_karma_transfered: int = 1

    # Voting on someone else's comment
    comment_upvote_min_karma: int = 0
    comment_downvote_min_karma: int = 30


class RankingSettings(BaseModel):
    """Score and rank configuration."""

    # Seconds added to news age, so brand new items don't divide by ~0
    news_age_padding: int = 60 * 10

    # Higher values = faster decay
    rank_aging_factor: float = 1.0

    # Above this many total votes the log term kicks in
    news_score_log_start: int = 10
    news_score_log_booster: float = 2.0

    # Cached ranks further than this from the real value get rewritten on read
    rank_update_epsilon: float = 0.001


class NewsSettings(BaseModel):
    """News submission and listing configuration."""

    news_edit_time: int = 60 * 15
    prevent_repost_time: int = 3600 * 48
    news_submission_break: int = 60 * 15

    top_news_per_page: int = 30
    latest_news_per_page: int = 100
    saved_news_per_page: int = 10

    title_max_length: int = 80


class CommentSettings(BaseModel):
    """Comment thread configuration."""

    comment_max_length: int = 4096
    comment_edit_time: int = 3600 * 2

    user_comments_per_page: int = 10
    replies_per_page: int = 10


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # If None, sends when a token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Every option group can be overridden from the environment using the
    nested delimiter, e.g.:

        REDIS__URL=redis://cache:6379/1
        RANKING__RANK_AGING_FACTOR=1.5
        NEWS__PREVENT_REPOST_TIME=86400
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows REDIS__URL syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    redis: RedisSettings = RedisSettings()
    auth: AuthSettings = AuthSettings()
    karma: KarmaSettings = KarmaSettings()
    ranking: RankingSettings = RankingSettings()
    news: NewsSettings = NewsSettings()
    comments: CommentSettings = CommentSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
