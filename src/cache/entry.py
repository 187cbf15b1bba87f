"""Cache entry model."""

from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    """A cached payload with its creation time and lifetime.

    ``timestamp`` and ``ttl`` are in seconds on the owning store's clock.
    """

    data: Any
    timestamp: float
    ttl: float

    @property
    def expires_at(self) -> float:
        return self.timestamp + self.ttl

    def is_expired(self, now: float) -> bool:
        """An entry is stale once ``now`` is past ``timestamp + ttl``."""
        return now > self.expires_at


__all__ = ["CacheEntry"]
