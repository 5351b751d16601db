"""
Background scheduler service for periodic jobs.

Runs the deadline alerts job on a fixed interval.
Uses APScheduler for in-process scheduling without external dependencies.
"""

from __future__ import annotations

from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from deliveryops.core.config import Settings, get_settings
from deliveryops.core.logger import logger
from deliveryops.models.job import DeadlineJobResult
from deliveryops.services.deadline_alert_runner import DeadlineAlertRunner
from deliveryops.utils.datetime_utils import now_utc

DEADLINE_ALERTS_JOB_ID = "deadline_alerts"


class BackgroundScheduler:
    """
    Background scheduler for periodic jobs.

    Features:
    - Deadline alerts job every DEADLINE_ALERTS_INTERVAL_MINUTES
    - Optional immediate run at startup
    - One run at a time inside the process (max_instances=1, coalesce)
    """

    def __init__(self, runner: DeadlineAlertRunner, settings: Optional[Settings] = None):
        self._runner = runner
        self._settings = settings or get_settings()
        self._scheduler: Optional[AsyncIOScheduler] = None
        self.last_result: Optional[DeadlineJobResult] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def start(self):
        """Start the scheduler."""
        settings = self._settings

        # Only run scheduler in non-test environments
        if settings.is_test:
            logger.info("Background scheduler disabled in test environment")
            return

        if not settings.DEADLINE_ALERTS_ENABLED:
            logger.info("Deadline alerts job disabled by configuration")
            return

        self._scheduler = AsyncIOScheduler(timezone="UTC")

        job_options = {}
        if settings.DEADLINE_ALERTS_RUN_ON_STARTUP:
            job_options["next_run_time"] = now_utc()

        self._scheduler.add_job(
            self._run_deadline_alerts,
            IntervalTrigger(minutes=settings.DEADLINE_ALERTS_INTERVAL_MINUTES),
            id=DEADLINE_ALERTS_JOB_ID,
            name="Deadline Alerts",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            **job_options,
        )

        self._scheduler.start()
        logger.info(
            "Background scheduler started:\n"
            f"  - Deadline alerts: every {settings.DEADLINE_ALERTS_INTERVAL_MINUTES} minutes"
        )

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Background scheduler stopped")

    async def _run_deadline_alerts(self):
        """Run the deadline alerts job with error handling."""
        try:
            self.last_result = await self._runner.run()
        except Exception as e:
            logger.error(f"Deadline alerts job failed: {e}")


# Global scheduler instance
_scheduler: Optional[BackgroundScheduler] = None


async def get_background_scheduler() -> BackgroundScheduler:
    """Get the global background scheduler instance."""
    global _scheduler
    if _scheduler is None:
        from deliveryops.api.deps import get_deadline_alert_runner

        _scheduler = BackgroundScheduler(runner=get_deadline_alert_runner())
    return _scheduler


async def start_background_scheduler():
    """Start the global background scheduler."""
    scheduler = await get_background_scheduler()
    await scheduler.start()


async def stop_background_scheduler():
    """Stop the global background scheduler."""
    global _scheduler
    if _scheduler:
        await _scheduler.stop()
        _scheduler = None
