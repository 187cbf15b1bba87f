"""Deterministic cache key construction.

Keys have the form ``prefix:name1=value1&name2=value2`` where parameter
names are sorted and each value is serialized as canonical JSON, so two
logically identical lookups always produce the same key regardless of
argument order, while ``"5"`` and ``5`` (or ``[1]`` and ``1``) stay distinct.
"""

import dataclasses
import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Union

from cache.errors import CacheKeyError

KEY_SEPARATOR = ":"
PAIR_SEPARATOR = "&"


def _to_json_value(value: Any) -> Any:
    """Fallback converter for values the json module does not handle natively."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def canonical_dumps(value: Any) -> str:
    """Serialize ``value`` to a stable, type-preserving JSON string."""
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_to_json_value,
    )


def create_cache_key(prefix: str, params: Union[Mapping[str, Any], Any]) -> str:
    """Build a cache key from a logical prefix and a parameter record.

    Args:
        prefix: Logical namespace, e.g. ``"search"`` or ``"citations"``
        params: Mapping of parameter names to values, or a dataclass instance

    Returns:
        Cache key string

    Raises:
        CacheKeyError: If a parameter name is not a string or a value cannot
            be serialized (including cyclic structures)
    """
    if dataclasses.is_dataclass(params) and not isinstance(params, type):
        params = {f.name: getattr(params, f.name) for f in dataclasses.fields(params)}

    if not isinstance(params, Mapping):
        raise CacheKeyError(prefix, f"params must be a mapping, got {type(params).__name__}")

    names = list(params.keys())
    for name in names:
        if not isinstance(name, str):
            raise CacheKeyError(prefix, f"parameter names must be strings, got {name!r}")

    pairs = []
    for name in sorted(names):
        try:
            serialized = canonical_dumps(params[name])
        except (TypeError, ValueError) as e:
            raise CacheKeyError(prefix, f"parameter '{name}': {e}") from e
        pairs.append(f"{name}={serialized}")

    return f"{prefix}{KEY_SEPARATOR}{PAIR_SEPARATOR.join(pairs)}"


__all__ = ["create_cache_key", "canonical_dumps"]
