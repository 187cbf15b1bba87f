"""Application context owning the process-wide response cache."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from cache.store import CacheStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Long-lived collaborators shared by every tool in the process."""

    cache: CacheStore = field(default_factory=CacheStore)


_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
        logger.debug(
            f"Created response cache (max_size={_app_context.cache.max_size}, "
            f"default_ttl={_app_context.cache.default_ttl}s)"
        )
    return _app_context


def get_response_cache() -> CacheStore:
    """Get the process-wide response cache."""
    return get_app_context().cache


def reset_app_context(context: Optional[AppContext] = None) -> AppContext:
    """Replace the global context, e.g. with one holding a small test store.

    Returns:
        The context now in effect
    """
    global _app_context
    _app_context = context if context is not None else AppContext()
    return _app_context


__all__ = ["AppContext", "get_app_context", "get_response_cache", "reset_app_context"]
