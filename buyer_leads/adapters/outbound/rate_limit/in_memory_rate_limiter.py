"""In-memory fixed-window rate limiter adapter."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from buyer_leads.application.ports.rate_limiter import RateLimiter


@dataclass
class _Window:
    count: int
    started_at: float


class InMemoryRateLimiter(RateLimiter):
    """
    Single-process fixed-window rate limiter.

    State lives in this process only; deployments with several instances need the
    Redis adapter instead.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize rate limiter.

        Args:
            limit: Maximum requests allowed per key within one window
            window_seconds: Window width in seconds
            clock: Monotonic time source in seconds
        """
        if limit <= 0:
            raise ValueError("Rate limit must be positive")
        if window_seconds <= 0:
            raise ValueError("Rate limit window must be positive")
        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        # Guards check-and-increment so concurrent requests cannot both pass
        self._lock = threading.Lock()

    async def allow(self, key: str) -> bool:
        """
        Check and count one request for a key.

        Args:
            key: Rate limit key

        Returns:
            True if the request is allowed, False if the limit is reached
        """
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self._window_seconds:
                self._windows[key] = _Window(count=1, started_at=now)
                return True
            if window.count >= self._limit:
                return False
            window.count += 1
            return True

    async def sweep(self) -> int:
        """
        Drop windows that have expired.

        Returns:
            Number of keys removed
        """
        now = self._clock()
        with self._lock:
            expired = [
                key
                for key, window in self._windows.items()
                if now - window.started_at >= self._window_seconds
            ]
            for key in expired:
                del self._windows[key]
        return len(expired)
