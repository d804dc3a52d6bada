"""Dependency injection factory functions."""

from buyer_leads.adapters.outbound.buyer import (
    InMemoryBuyerRepository,
    PostgresBuyerRepository,
)
from buyer_leads.adapters.outbound.rate_limit.in_memory_rate_limiter import InMemoryRateLimiter
from buyer_leads.adapters.outbound.rate_limit.noop_rate_limiter import NoOpRateLimiter
from buyer_leads.adapters.outbound.rate_limit.redis_rate_limiter import RedisRateLimiter
from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.application.ports.rate_limiter import RateLimiter
from buyer_leads.infrastructure.config.settings import settings
from buyer_leads.infrastructure.db import init_db


def create_buyer_repository() -> BuyerRepository:
    """
    Factory function to create buyer repository.

    Returns:
        BuyerRepository instance
    """
    if settings.buyer_repository == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when BUYER_REPOSITORY=postgres")
        init_db()
        return PostgresBuyerRepository()
    else:
        return InMemoryBuyerRepository()


def create_rate_limiter(name: str, limit: int, window_seconds: int) -> RateLimiter:
    """
    Factory function to create a rate limiter.

    Args:
        name: Limiter name (namespaces Redis keys)
        limit: Maximum requests per key within one window
        window_seconds: Window width in seconds

    Returns:
        RateLimiter instance (in-memory, Redis or NoOp)
    """
    if not settings.rate_limit_enabled:
        return NoOpRateLimiter()

    if settings.rate_limiter_backend == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required when RATE_LIMITER_BACKEND=redis")
        return RedisRateLimiter(settings.redis_url, name, limit, window_seconds)

    return InMemoryRateLimiter(limit, window_seconds)


def create_import_rate_limiter() -> RateLimiter:
    """
    Factory function to create the per-actor batch import limiter.

    Returns:
        RateLimiter instance
    """
    return create_rate_limiter(
        "import", settings.import_rate_limit, settings.import_rate_window_seconds
    )


def create_create_rate_limiter() -> RateLimiter:
    """
    Factory function to create the per-origin single create limiter.

    Returns:
        RateLimiter instance
    """
    return create_rate_limiter(
        "create", settings.create_rate_limit, settings.create_rate_window_seconds
    )
