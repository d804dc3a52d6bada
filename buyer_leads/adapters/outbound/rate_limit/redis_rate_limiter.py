"""Redis fixed-window rate limiter adapter."""

from typing import Optional

from redis import asyncio as aioredis

from buyer_leads.application.ports.rate_limiter import RateLimiter

# Check-and-increment runs as one script so concurrent instances cannot race.
# Denied requests leave the counter untouched; the first hit of a window sets its expiry.
_ALLOW_SCRIPT = """
local current = tonumber(redis.call('GET', KEYS[1]) or '0')
if current >= tonumber(ARGV[1]) then
    return 0
end
current = redis.call('INCR', KEYS[1])
if current == 1 then
    redis.call('PEXPIRE', KEYS[1], ARGV[2])
end
return 1
"""


class RedisRateLimiter(RateLimiter):
    """Redis adapter for a rate limiter shared by every service instance."""

    KEY_PREFIX = "ratelimit:"

    def __init__(self, redis_url: str, name: str, limit: int, window_seconds: int) -> None:
        """
        Initialize Redis rate limiter.

        Args:
            redis_url: Redis connection URL
            name: Limiter name, used to namespace keys (e.g., 'import')
            limit: Maximum requests allowed per key within one window
            window_seconds: Window width in seconds
        """
        self._redis_url = redis_url
        self._name = name
        self._limit = limit
        self._window_ms = window_seconds * 1000
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = await aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_key(self, key: str) -> str:
        """
        Make Redis key for a rate limit key.

        Args:
            key: Actor id or network origin

        Returns:
            Redis key string
        """
        return f"{self.KEY_PREFIX}{self._name}:{key}"

    async def allow(self, key: str) -> bool:
        """
        Check and count one request for a key.

        Args:
            key: Rate limit key

        Returns:
            True if the request is allowed, False if the limit is reached
        """
        client = await self._get_client()
        allowed = await client.eval(_ALLOW_SCRIPT, 1, self._make_key(key), self._limit, self._window_ms)
        return int(allowed) == 1

    async def sweep(self) -> int:
        """
        No-op; Redis expires windows on its own.

        Returns:
            Always 0
        """
        return 0

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None
