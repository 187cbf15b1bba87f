"""Key matchers used for bulk cache invalidation."""

import re
from typing import Protocol, Union, runtime_checkable

from cache.errors import InvalidPatternError


@runtime_checkable
class KeyMatcher(Protocol):
    """Anything that can decide whether a cache key should be invalidated."""

    def matches(self, key: str) -> bool:
        ...


class RegexKeyPattern:
    """Regular-expression matcher over raw cache keys.

    The expression is compiled eagerly so that a malformed pattern fails
    before any entry is touched. Matching uses search semantics: the
    expression may match anywhere in the key unless anchored.
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        try:
            self._regex = re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, e) from e

    def matches(self, key: str) -> bool:
        return self._regex.search(key) is not None

    def __repr__(self) -> str:
        return f"RegexKeyPattern({self.pattern!r})"


def prefix_pattern(prefix: str) -> RegexKeyPattern:
    """Matcher for every key built under ``prefix``."""
    return RegexKeyPattern(f"^{re.escape(prefix)}:")


def as_matcher(pattern: Union[str, KeyMatcher]) -> KeyMatcher:
    """Coerce a regex string or an existing matcher into a KeyMatcher."""
    if isinstance(pattern, str):
        return RegexKeyPattern(pattern)
    if isinstance(pattern, KeyMatcher):
        return pattern
    raise TypeError(f"Expected a regex string or KeyMatcher, got {type(pattern).__name__}")


__all__ = ["KeyMatcher", "RegexKeyPattern", "prefix_pattern", "as_matcher"]
