"""Redis connection management.

Provides the async Redis client shared by all repositories.
"""

from redis.asyncio import Redis

from lamer.config import Settings
from lamer.util.error import ConfigurationError

SUPPORTED_SCHEMES = ("redis://", "rediss://", "unix://")


def create_redis_client(settings: Settings) -> Redis:
    """Create async Redis client.

    Responses are decoded to ``str`` so repositories and mappers never deal
    with raw bytes.

    Args:
        settings: Application settings with the Redis URL

    Returns:
        Configured client backed by a connection pool

    Raises:
        ConfigurationError: If the URL scheme is not a Redis scheme
    """
    url = settings.redis.url
    if not url.startswith(SUPPORTED_SCHEMES):
        raise ConfigurationError(f"Unsupported Redis URL: {url}")

    return Redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=settings.redis.socket_timeout,
        max_connections=settings.redis.max_connections,
        health_check_interval=30,  # Verify idle connections before use
    )
