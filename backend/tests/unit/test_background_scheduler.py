"""
Unit tests for BackgroundScheduler.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from deliveryops.core.config import Settings
from deliveryops.models.job import AlertProcessingResult, DeadlineJobResult, OverdueDetectionResult
from deliveryops.services.background_scheduler import DEADLINE_ALERTS_JOB_ID, BackgroundScheduler
from helpers import utc


@pytest.fixture
def runner():
    runner = AsyncMock()
    runner.run = AsyncMock(return_value=DeadlineJobResult(
        alerts=AlertProcessingResult(),
        overdue=OverdueDetectionResult(),
        executed_at=utc(2025, 1, 1),
    ))
    return runner


class TestStart:

    @pytest.mark.asyncio
    async def test_disabled_in_test_environment(self, runner):
        scheduler = BackgroundScheduler(runner, Settings(ENVIRONMENT="test"))

        await scheduler.start()

        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_disabled_by_configuration(self, runner):
        scheduler = BackgroundScheduler(runner, Settings(ENVIRONMENT="local", DEADLINE_ALERTS_ENABLED=False))

        await scheduler.start()

        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_registers_interval_job(self, runner):
        settings = Settings(
            ENVIRONMENT="local",
            DEADLINE_ALERTS_INTERVAL_MINUTES=15,
            DEADLINE_ALERTS_RUN_ON_STARTUP=False,
        )
        scheduler = BackgroundScheduler(runner, settings)

        await scheduler.start()
        try:
            assert scheduler.running is True
            job = scheduler._scheduler.get_job(DEADLINE_ALERTS_JOB_ID)
            assert job.trigger.interval == timedelta(minutes=15)
            assert job.max_instances == 1
            assert job.coalesce is True
        finally:
            await scheduler.stop()

        assert scheduler.running is False


class TestRunJob:

    @pytest.mark.asyncio
    async def test_keeps_last_result(self, runner):
        scheduler = BackgroundScheduler(runner, Settings(ENVIRONMENT="test"))

        await scheduler._run_deadline_alerts()

        assert scheduler.last_result.executed_at == utc(2025, 1, 1)

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, runner):
        runner.run.side_effect = RuntimeError("boom")
        scheduler = BackgroundScheduler(runner, Settings(ENVIRONMENT="test"))

        await scheduler._run_deadline_alerts()

        assert scheduler.last_result is None
