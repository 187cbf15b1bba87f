"""PaperScout response cache.

A bounded, time-expiring, recency-ordered key/value store shared by every
tool that calls an external paper-metadata API, plus a fetch-or-compute
wrapper that turns an async lookup into a cache-checked one:

    key = create_cache_key("citations", {"paper_id": pid, "limit": 10})
    citations = await cached_fetch(key, lambda: s2.get_citations(pid, 10))
"""

from cache.context import AppContext, get_app_context, get_response_cache, reset_app_context
from cache.entry import CacheEntry
from cache.errors import CacheError, CacheKeyError, InvalidPatternError
from cache.fetch import cached, cached_fetch
from cache.keys import canonical_dumps, create_cache_key
from cache.patterns import KeyMatcher, RegexKeyPattern, prefix_pattern
from cache.store import DEFAULT_MAX_SIZE, DEFAULT_TTL, CacheStore

__all__ = [
    "CacheEntry",
    "CacheStore",
    "DEFAULT_TTL",
    "DEFAULT_MAX_SIZE",
    "create_cache_key",
    "canonical_dumps",
    "cached_fetch",
    "cached",
    "KeyMatcher",
    "RegexKeyPattern",
    "prefix_pattern",
    # Errors
    "CacheError",
    "CacheKeyError",
    "InvalidPatternError",
    # Process-wide instance
    "AppContext",
    "get_app_context",
    "get_response_cache",
    "reset_app_context",
]
