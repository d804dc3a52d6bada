"""Unit tests for Redis rate limiter adapter."""

from unittest.mock import AsyncMock, patch

import pytest

from buyer_leads.adapters.outbound.rate_limit.redis_rate_limiter import RedisRateLimiter


@pytest.fixture
def mock_redis_client():
    """Create a mock Redis client."""
    client = AsyncMock()
    client.eval = AsyncMock(return_value=1)
    client.close = AsyncMock()
    return client


@pytest.fixture
def redis_limiter():
    """Create Redis rate limiter with test URL."""
    return RedisRateLimiter("redis://localhost:6379/0", "import", limit=3, window_seconds=600)


@pytest.mark.asyncio
async def test_allow_returns_true_when_script_allows(redis_limiter, mock_redis_client):
    """Test allow returns True when the script admits the request."""
    with patch(
        "buyer_leads.adapters.outbound.rate_limit.redis_rate_limiter.aioredis.from_url",
        new_callable=AsyncMock,
    ) as mock_from_url:
        mock_from_url.return_value = mock_redis_client
        redis_limiter._client = None

        result = await redis_limiter.allow("agent-1")

        assert result is True
        args = mock_redis_client.eval.call_args.args
        assert args[1:] == (1, "ratelimit:import:agent-1", 3, 600000)


@pytest.mark.asyncio
async def test_allow_returns_false_when_script_denies(redis_limiter, mock_redis_client):
    """Test allow returns False when the limit is reached."""
    mock_redis_client.eval.return_value = 0

    with patch(
        "buyer_leads.adapters.outbound.rate_limit.redis_rate_limiter.aioredis.from_url",
        new_callable=AsyncMock,
    ) as mock_from_url:
        mock_from_url.return_value = mock_redis_client
        redis_limiter._client = None

        result = await redis_limiter.allow("agent-1")

        assert result is False


@pytest.mark.asyncio
async def test_client_is_reused(redis_limiter, mock_redis_client):
    """Test the Redis client is created once."""
    with patch(
        "buyer_leads.adapters.outbound.rate_limit.redis_rate_limiter.aioredis.from_url",
        new_callable=AsyncMock,
    ) as mock_from_url:
        mock_from_url.return_value = mock_redis_client
        redis_limiter._client = None

        await redis_limiter.allow("agent-1")
        await redis_limiter.allow("agent-2")

        mock_from_url.assert_called_once()


@pytest.mark.asyncio
async def test_sweep_is_noop(redis_limiter):
    """Test sweep leaves expiry to Redis."""
    assert await redis_limiter.sweep() == 0


@pytest.mark.asyncio
async def test_close(redis_limiter, mock_redis_client):
    """Test close releases the client."""
    redis_limiter._client = mock_redis_client

    await redis_limiter.close()

    mock_redis_client.close.assert_called_once()
    assert redis_limiter._client is None
