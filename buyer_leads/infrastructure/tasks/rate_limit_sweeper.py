"""Periodic cleanup of expired rate limiter state."""

import asyncio
import logging
from contextlib import suppress
from typing import Optional

from buyer_leads.application.ports.rate_limiter import RateLimiter
from buyer_leads.infrastructure.logging.logger import log_event, logger


class RateLimitSweeper:
    """Background task that periodically sweeps a set of rate limiters."""

    def __init__(self, limiters: dict[str, RateLimiter], interval_seconds: float) -> None:
        """
        Initialize sweeper.

        Args:
            limiters: Limiters to sweep, keyed by name (used in logs)
            interval_seconds: Delay between sweeps
        """
        self._limiters = limiters
        self._interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        """Whether the background task is active."""
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> int:
        """
        Sweep every limiter once.

        A failing limiter is logged and skipped so the others are still swept.

        Returns:
            Total number of keys removed
        """
        removed = 0
        for name, limiter in self._limiters.items():
            try:
                count = await limiter.sweep()
            except Exception:
                logger.exception(f"Rate limiter sweep failed for {name}")
                continue
            removed += count
            if count:
                log_event(
                    request_id="sweeper",
                    component="rate_limit",
                    level=logging.DEBUG,
                    rate_limiter=name,
                    swept_keys=count,
                )
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_seconds)
            await self.sweep_once()

    def start(self) -> None:
        """Start the background task on the running event loop (no-op if already running)."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="rate-limit-sweeper")

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
