"""Rate limiting utilities."""

import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Minimum-interval rate limiter shared by the API clients.

    Guarantees that consecutive requests are spaced at least
    ``min_interval`` seconds apart, measured on ``clock``.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "",
    ):
        """
        Initialize rate limiter.

        Args:
            min_interval: Minimum seconds between two requests
            clock: Monotonic time source
            name: Label used in debug logging
        """
        self.min_interval = min_interval
        self.clock = clock
        self.name = name
        self.last_request_time: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _get_lock(self) -> asyncio.Lock:
        """Lock bound to the running event loop, rebuilt when the loop changes."""
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def time_until_ready(self) -> float:
        """Seconds to wait before the next request may go out."""
        if self.last_request_time is None:
            return 0.0
        elapsed = self.clock() - self.last_request_time
        return max(0.0, self.min_interval - elapsed)

    def wait_if_needed(self) -> None:
        """Block the calling thread until the interval has passed."""
        wait = self.time_until_ready()
        if wait > 0:
            logger.debug(f"{self.name or 'rate limiter'}: waiting {wait:.1f}s")
            time.sleep(wait)
        self.last_request_time = self.clock()

    async def wait_if_needed_async(self) -> None:
        """Async version of wait_if_needed; concurrent callers queue up."""
        async with self._get_lock():
            wait = self.time_until_ready()
            if wait > 0:
                logger.debug(f"{self.name or 'rate limiter'}: waiting {wait:.1f}s")
                await asyncio.sleep(wait)
            self.last_request_time = self.clock()
