"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured events
    logfire.info("News inserted", news_id=news_id, user_id=user_id)

    # Spans around engine operations
    with logfire.span("news_service.insert_news", user_id=user_id):
        ...
"""

import logfire

from lamer.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Token Configuration:
    - Set OBSERVABILITY__LOGFIRE_TOKEN to enable cloud sending
    - OBSERVABILITY__SEND_TO_LOGFIRE overrides the token based default

    Args:
        settings: Application settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": "lamer-engine",
        "service_version": "1.0.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_redis() -> None:
    """Instrument the Redis client with Logfire.

    Traces every command sent to the store with its duration, which shows
    the round trips each engine operation costs.
    """
    logfire.instrument_redis(capture_statement=True)
    logfire.info("Redis instrumented")
