"""Unit tests for NoOp rate limiter."""

import pytest

from buyer_leads.adapters.outbound.rate_limit.noop_rate_limiter import NoOpRateLimiter


@pytest.mark.asyncio
async def test_always_allows():
    """Test every request is allowed."""
    limiter = NoOpRateLimiter()

    assert all([await limiter.allow("agent-1") for _ in range(100)])
    assert await limiter.sweep() == 0
