"""Engine bootstrap.

The web layer (out of this package) builds the engine once per process
and opens one request scope per incoming request:

    container = create_engine()
    async with container() as request:
        use_case = await request.get(SubmitNewsUseCase)
        response = await use_case.execute(SubmitNewsRequest(...))
    ...
    await container.close()
"""

from typing import Optional

from dishka import AsyncContainer

from lamer.config import Settings
from lamer.util.di.container import create_container
from lamer.util.logging import get_logger, setup_logging
from lamer.util.observability import configure_logfire

logger = get_logger(__name__)


def create_engine(settings: Optional[Settings] = None) -> AsyncContainer:
    """Configure logging and observability, then build the DI container.

    Args:
        settings: Application settings, loaded from the environment if omitted

    Returns:
        Production container; the Redis client is created on first use
    """
    settings = settings or Settings()

    setup_logging(settings)
    # Logfire must be configured before the Redis client is instrumented
    configure_logfire(settings)

    container = create_container(settings)
    logger.info(f"Engine ready: environment={settings.environment}")
    return container
