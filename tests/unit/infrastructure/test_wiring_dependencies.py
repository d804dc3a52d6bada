"""Unit tests for dependency factory functions and container."""

from unittest.mock import patch

import pytest

from buyer_leads.adapters.outbound.buyer import InMemoryBuyerRepository
from buyer_leads.adapters.outbound.rate_limit.in_memory_rate_limiter import InMemoryRateLimiter
from buyer_leads.adapters.outbound.rate_limit.noop_rate_limiter import NoOpRateLimiter
from buyer_leads.adapters.outbound.rate_limit.redis_rate_limiter import RedisRateLimiter
from buyer_leads.infrastructure.config.settings import settings
from buyer_leads.infrastructure.wiring.container import Container
from buyer_leads.infrastructure.wiring.dependencies import (
    create_buyer_repository,
    create_import_rate_limiter,
    create_rate_limiter,
)


def test_default_repository_is_in_memory():
    """Test the in-memory repository is used by default."""
    with patch.object(settings, "buyer_repository", "in_memory"):
        assert isinstance(create_buyer_repository(), InMemoryBuyerRepository)


def test_postgres_repository_requires_database_url():
    """Test postgres mode fails fast without a database URL."""
    with patch.object(settings, "buyer_repository", "postgres"), patch.object(
        settings, "database_url", ""
    ):
        with pytest.raises(ValueError, match="DATABASE_URL"):
            create_buyer_repository()


def test_rate_limiter_disabled_returns_noop():
    """Test disabling rate limiting yields the no-op adapter."""
    with patch.object(settings, "rate_limit_enabled", False):
        assert isinstance(create_rate_limiter("import", 3, 600), NoOpRateLimiter)


def test_rate_limiter_backends():
    """Test backend selection for enabled rate limiting."""
    with patch.object(settings, "rate_limit_enabled", True):
        with patch.object(settings, "rate_limiter_backend", "in_memory"):
            assert isinstance(create_import_rate_limiter(), InMemoryRateLimiter)
        with patch.object(settings, "rate_limiter_backend", "redis"), patch.object(
            settings, "redis_url", "redis://localhost:6379/0"
        ):
            assert isinstance(create_rate_limiter("create", 10, 60), RedisRateLimiter)


def test_container_uses_overrides():
    """Test injected dependencies are used by the container's use cases."""
    repository = InMemoryBuyerRepository()
    limiter = NoOpRateLimiter()

    container = Container(
        repository=repository, import_rate_limiter=limiter, create_rate_limiter=limiter
    )

    assert container.repository is repository
    assert container.import_buyers is not None
    assert container.sweeper.running is False
