"""Dependency injection container."""

from typing import Optional

from dishka import AsyncContainer, make_async_container

from lamer.config import Settings
from lamer.util.di import PROVIDERS, ProdConfigProvider, get_provider


def create_container(settings: Optional[Settings] = None) -> AsyncContainer:
    """Build production container (all prod implementations).

    Settings are loaded from environment variables unless given. Callers
    open a request scope per unit of work:

        async with container() as request:
            use_case = await request.get(SubmitNewsUseCase)

    Args:
        settings: Settings every provider resolves, instead of the environment

    Returns:
        Configured DI container with production providers
    """
    provider_instances = []
    for base in PROVIDERS:
        if base is ProdConfigProvider:
            provider_instances.append(ProdConfigProvider(settings))
        else:
            provider_instances.append(get_provider(base, use_mock=False)())
    return make_async_container(*provider_instances)
