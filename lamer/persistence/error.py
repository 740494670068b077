"""Persistence layer errors."""

import functools
from typing import Awaitable, Callable, ParamSpec, TypeVar

import logfire
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

P = ParamSpec("P")
R = TypeVar("R")


class PersistenceError(Exception):
    """Base persistence error."""

    reason = "store_error"


class StoreUnavailableError(PersistenceError):
    """The store could not be reached or did not answer in time.

    Never recovered locally: it propagates to the caller as a hard failure.
    """

    reason = "store_unavailable"


def translate_store_errors(
    func: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[R]]:
    """Map transport failures of the Redis client to StoreUnavailableError."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except (RedisConnectionError, RedisTimeoutError) as e:
            logfire.error(
                "Store unavailable",
                operation=func.__qualname__,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StoreUnavailableError(str(e)) from e

    return wrapper
