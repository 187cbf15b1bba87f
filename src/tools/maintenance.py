"""Cache administration tools."""

import logging
from typing import Optional

from cache import CacheStore, get_response_cache

logger = logging.getLogger(__name__)


def clear_cache(pattern: Optional[str] = None, store: Optional[CacheStore] = None) -> str:
    """Clear the whole response cache, or only keys matching ``pattern``.

    Raises:
        InvalidPatternError: If ``pattern`` is not a valid regular expression
    """
    store = store if store is not None else get_response_cache()

    if pattern:
        count = store.clear_pattern(pattern)
        logger.info(f"Cleared {count} cache entries matching '{pattern}'")
        return f"Cleared {count} cache entries matching pattern: {pattern}"

    count = len(store)
    store.clear()
    logger.info(f"Cleared all {count} cache entries")
    return f"Cleared all cache entries ({count} removed)"


def format_cache_stats(store: Optional[CacheStore] = None) -> str:
    """Human-readable cache statistics."""
    stats = (store if store is not None else get_response_cache()).get_stats()
    lines = [f"Cache entries: {stats['size']}/{stats['max_size']}"]
    for key in sorted(stats["keys"]):
        lines.append(f"  - {key}")
    return "\n".join(lines)
