"""No-op rate limiter adapter for when rate limiting is disabled."""

from buyer_leads.application.ports.rate_limiter import RateLimiter


class NoOpRateLimiter(RateLimiter):
    """No-op adapter that allows every request."""

    async def allow(self, key: str) -> bool:
        """
        Always allow.

        Args:
            key: Rate limit key (ignored)

        Returns:
            Always True
        """
        return True

    async def sweep(self) -> int:
        """
        Nothing to sweep.

        Returns:
            Always 0
        """
        return 0
