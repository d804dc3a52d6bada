"""Unit tests for in-memory rate limiter."""

import asyncio

import pytest

from buyer_leads.adapters.outbound.rate_limit.in_memory_rate_limiter import InMemoryRateLimiter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def limiter(clock):
    """Create a limiter allowing 3 requests per 600 seconds."""
    return InMemoryRateLimiter(limit=3, window_seconds=600, clock=clock)


@pytest.mark.asyncio
async def test_limit_plus_one_request_denied(limiter):
    """Test the (L+1)-th request inside the window is denied."""
    results = [await limiter.allow("agent-1") for _ in range(4)]

    assert results == [True, True, True, False]


@pytest.mark.asyncio
async def test_denied_requests_do_not_extend_window(limiter, clock):
    """Test denied requests do not push the window forward."""
    for _ in range(3):
        await limiter.allow("agent-1")

    clock.advance(599)
    assert await limiter.allow("agent-1") is False

    clock.advance(1)
    assert await limiter.allow("agent-1") is True


@pytest.mark.asyncio
async def test_first_request_after_window_starts_fresh_window(limiter, clock):
    """Test the first request after expiry is allowed and starts a new window."""
    for _ in range(3):
        await limiter.allow("agent-1")

    clock.advance(600)

    assert [await limiter.allow("agent-1") for _ in range(4)] == [True, True, True, False]


@pytest.mark.asyncio
async def test_keys_are_independent(limiter):
    """Test one key exhausting its quota does not affect another."""
    for _ in range(3):
        await limiter.allow("agent-1")

    assert await limiter.allow("agent-1") is False
    assert await limiter.allow("agent-2") is True


@pytest.mark.asyncio
async def test_concurrent_requests_never_exceed_limit(limiter):
    """Test at most L of many concurrent requests are allowed."""
    results = await asyncio.gather(*(limiter.allow("agent-1") for _ in range(20)))

    assert sum(results) == 3


@pytest.mark.asyncio
async def test_sweep_removes_only_expired_windows(limiter, clock):
    """Test sweep drops expired windows and keeps live ones."""
    await limiter.allow("agent-1")
    clock.advance(300)
    await limiter.allow("agent-2")
    clock.advance(300)

    removed = await limiter.sweep()

    assert removed == 1
    assert await limiter.sweep() == 0


@pytest.mark.asyncio
async def test_sweep_does_not_change_decisions(limiter, clock):
    """Test a swept key behaves like a key whose window expired."""
    for _ in range(3):
        await limiter.allow("agent-1")
    clock.advance(600)

    await limiter.sweep()

    assert await limiter.allow("agent-1") is True


@pytest.mark.parametrize("limit,window", [(0, 60), (-1, 60), (3, 0)])
def test_rejects_non_positive_configuration(limit, window):
    """Test limit and window must be positive."""
    with pytest.raises(ValueError):
        InMemoryRateLimiter(limit=limit, window_seconds=window)
