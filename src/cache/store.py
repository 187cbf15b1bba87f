"""Bounded in-memory response cache with TTL expiry and LRU eviction.

Shared by every tool that issues an expensive or rate-limited external call.
Entries expire lazily: staleness is only checked when a key is read (or when
``clear_expired`` is called explicitly), so no background timers are needed.
Size is capped at ``max_size`` regardless of TTLs by evicting the least
recently used key.
"""

import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional, Union

from cache.entry import CacheEntry
from cache.patterns import KeyMatcher, as_matcher
from utils.config import Config

logger = logging.getLogger(__name__)

DEFAULT_TTL = Config.CACHE_DEFAULT_TTL
DEFAULT_MAX_SIZE = Config.CACHE_MAX_SIZE


class CacheStore:
    """Key/value store bounded by size, with per-entry TTL and LRU order.

    ``_entries`` is an OrderedDict used both as the key index and as the
    recency order: the head is the least recently used key, the tail the
    most recently used. Every operation is synchronous, so under asyncio it
    runs to completion without interleaving.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache store.

        Args:
            max_size: Hard upper bound on the number of entries
            default_ttl: Lifetime in seconds used when ``set`` gets no ttl
            clock: Time source in seconds
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a fresh value from the cache.

        Args:
            key: Cache key
            default: Returned when the key is absent or expired

        Returns:
            Cached payload, or ``default``
        """
        entry = self._entries.get(key)
        if entry is None:
            return default

        if entry.is_expired(self._clock()):
            logger.debug(f"Cache entry expired: {key}")
            self.delete(key)
            return default

        self._entries.move_to_end(key)
        return entry.data

    def set(self, key: str, data: Any, ttl: Optional[float] = None) -> None:
        """Store a value, evicting the least recently used key if full.

        Args:
            key: Cache key
            data: Payload to cache (opaque to the store)
            ttl: Lifetime in seconds, uses the store default if not specified
        """
        if key not in self._entries and len(self._entries) >= self.max_size:
            self._evict_lru()

        self._entries[key] = CacheEntry(
            data=data,
            timestamp=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )
        self._entries.move_to_end(key)

    def delete(self, key: str) -> bool:
        """Delete a cache entry.

        Returns:
            True if an entry was removed
        """
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def clear_pattern(self, pattern: Union[str, KeyMatcher]) -> int:
        """Delete every key matching ``pattern``.

        Args:
            pattern: Regular expression searched in the raw key, or a
                KeyMatcher

        Returns:
            Number of entries removed

        Raises:
            InvalidPatternError: If ``pattern`` is not a valid expression;
                the store is left untouched
        """
        matcher = as_matcher(pattern)
        doomed = [key for key in self._entries if matcher.matches(key)]
        for key in doomed:
            del self._entries[key]

        logger.debug(f"Invalidated {len(doomed)} cache entries matching {pattern!r}")
        return len(doomed)

    def clear_expired(self) -> int:
        """Remove expired entries eagerly.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "keys": list(self._entries.keys()),
        }

    def _evict_lru(self) -> None:
        if not self._entries:
            return
        key, _ = self._entries.popitem(last=False)
        logger.debug(f"Evicted least recently used cache entry: {key}")


__all__ = ["CacheStore", "DEFAULT_TTL", "DEFAULT_MAX_SIZE"]
