"""Rate limiter port."""

from abc import ABC, abstractmethod


class RateLimiter(ABC):
    """Port interface for a fixed-window request rate limiter."""

    @abstractmethod
    async def allow(self, key: str) -> bool:
        """
        Check and count one request for a key.

        Args:
            key: Rate limit key (actor id or network origin)

        Returns:
            True if the request is allowed, False if the limit is reached
        """
        pass

    @abstractmethod
    async def sweep(self) -> int:
        """
        Drop state for keys whose window has expired.

        Returns:
            Number of keys removed
        """
        pass
