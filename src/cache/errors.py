"""Exceptions raised by the response cache."""

from typing import Optional


class CacheError(Exception):
    """Base exception for response cache errors."""


class InvalidPatternError(CacheError, ValueError):
    """Raised when an invalidation pattern is not a valid regular expression."""

    def __init__(self, pattern: str, original_error: Optional[Exception] = None):
        self.pattern = pattern
        self.original_error = original_error
        detail = f": {original_error}" if original_error else ""
        super().__init__(f"Invalid cache key pattern {pattern!r}{detail}")


class CacheKeyError(CacheError, TypeError):
    """Raised when request parameters cannot be serialized into a cache key."""

    def __init__(self, prefix: str, message: str):
        self.prefix = prefix
        super().__init__(f"Cannot build cache key for '{prefix}': {message}")


__all__ = ["CacheError", "InvalidPatternError", "CacheKeyError"]
