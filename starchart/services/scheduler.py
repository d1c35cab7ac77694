"""Internal task scheduler using APScheduler.

Runs periodic housekeeping (sweeping expired charts out of the response
cache) within the FastAPI process.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from starchart.config import settings
from starchart.core.cache import ResponseCache

logger = logging.getLogger(__name__)


async def run_cache_sweep(cache: ResponseCache) -> int:
    """Sweep expired entries from the response cache. Returns the number removed."""
    removed = cache.sweep()
    if removed:
        logger.info(f"[scheduler] Cache sweep: removed {removed} expired chart(s)")
    return removed


class Scheduler:
    """Manages the APScheduler instance and job registration."""

    def __init__(self) -> None:
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self, cache: ResponseCache) -> None:
        """Start the scheduler and register jobs."""
        if not settings.scheduler_enabled:
            logger.info("[scheduler] Disabled via SCHEDULER_ENABLED=false")
            return

        self._scheduler = AsyncIOScheduler()

        self._scheduler.add_job(
            run_cache_sweep,
            trigger=IntervalTrigger(seconds=settings.cache_check_period_seconds),
            args=[cache],
            id="cache_sweep",
            name="Response Cache Sweep",
            replace_existing=True,
        )

        self._scheduler.start()
        logger.info(
            f"[scheduler] Started with cache sweep every "
            f"{settings.cache_check_period_seconds}s"
        )

    def stop(self) -> None:
        """Gracefully shut down the scheduler."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("[scheduler] Stopped")


scheduler = Scheduler()
