"""Fetch-or-compute memoization on top of the response cache."""

import inspect
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from cache.context import get_response_cache
from cache.keys import create_cache_key
from cache.store import CacheStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


async def cached_fetch(
    key: str,
    producer: Callable[[], Awaitable[T]],
    ttl: Optional[float] = None,
    store: Optional[CacheStore] = None,
) -> T:
    """Return the cached value for ``key``, or produce, store and return it.

    The producer is awaited only on a miss. If it raises, the exception
    propagates unchanged and nothing is cached, so the next call retries.
    Concurrent misses on the same key are not coalesced: each caller runs
    its own producer and the last one to finish wins the slot.

    Args:
        key: Cache key, usually built with create_cache_key
        producer: Zero-argument coroutine function performing the real call
        ttl: Lifetime in seconds for a freshly produced value
        store: Cache to use, defaults to the process-wide store

    Returns:
        Cached or freshly produced value
    """
    store = store if store is not None else get_response_cache()

    cached = store.get(key, _MISSING)
    if cached is not _MISSING:
        logger.debug(f"Cache hit: {key}")
        return cached

    logger.debug(f"Cache miss: {key}")
    data = await producer()
    store.set(key, data, ttl)
    return data


def cached(
    prefix: str,
    ttl: Optional[float] = None,
    store: Optional[CacheStore] = None,
    ignore: Iterable[str] = ("self", "cls"),
):
    """Decorator memoizing an async function through cached_fetch.

    The key is built from ``prefix`` and the function's bound arguments
    (defaults applied), so ``f(1, b=2)`` and ``f(b=2, a=1)`` share an entry.

    Example:
        @cached("citations", ttl=600)
        async def citations(paper_id: str, limit: int = 10): ...
    """
    ignored = set(ignore)

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            params = {
                name: value
                for name, value in bound.arguments.items()
                if name not in ignored
            }
            key = create_cache_key(prefix, params)
            return await cached_fetch(key, lambda: func(*args, **kwargs), ttl, store)

        return wrapper

    return decorator


__all__ = ["cached_fetch", "cached"]
