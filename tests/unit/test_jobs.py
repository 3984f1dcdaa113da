"""Tests for the scheduler process, its health server and the sweep actor."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiohttp.test_utils import TestClient, TestServer

from app.services.investment import SweepReport
from jobs.health import create_health_app
from jobs.scheduler import create_scheduler
from jobs.tasks import maturity_sweep


class TestHealthServer:
    """Tests for the scheduler health endpoints."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("running, status", [(True, 200), (False, 503)])
    async def test_health(self, session_maker, running, status) -> None:
        scheduler = MagicMock()
        scheduler.running = running
        scheduler.get_jobs.return_value = []

        async with TestClient(TestServer(create_health_app(scheduler, session_maker))) as client:
            resp = await client.get("/health")
            assert resp.status == status
            body = await resp.json()
            assert body["scheduler_running"] is running
            assert body["jobs_count"] == 0

    @pytest.mark.asyncio
    async def test_ready_checks_database(self, session_maker) -> None:
        scheduler = MagicMock(running=True)

        async with TestClient(TestServer(create_health_app(scheduler, session_maker))) as client:
            resp = await client.get("/health/ready")
            assert resp.status == 200
            assert (await resp.json())["ready"] is True

            resp = await client.get("/health/live")
            assert (await resp.json())["alive"] is True

    @pytest.mark.asyncio
    async def test_not_ready_when_database_down(self) -> None:
        scheduler = MagicMock(running=True)
        broken_maker = MagicMock(side_effect=RuntimeError("no database"))

        async with TestClient(TestServer(create_health_app(scheduler, broken_maker))) as client:
            resp = await client.get("/health/ready")
            assert resp.status == 503
            assert (await resp.json())["database"] == "unavailable"


class TestScheduler:
    """Tests for scheduler wiring."""

    def test_sweep_job_registered(self) -> None:
        scheduler = create_scheduler()
        job = scheduler.get_job("maturity_sweep")
        assert job is not None
        assert job.max_instances == 1
        assert job.coalesce is True


class TestMaturitySweepActor:
    """Tests for the dramatiq sweep actor body."""

    @pytest.mark.asyncio
    async def test_runs_under_lock(self, mock_redis) -> None:
        report = SweepReport(found=2, settled=2)
        with (
            patch.object(maturity_sweep, "get_redis_client", return_value=mock_redis),
            patch.object(
                maturity_sweep, "run_maturity_sweep", AsyncMock(return_value=report)
            ) as run,
        ):
            result = await maturity_sweep._process_matured_investments_async()

        assert result["settled"] == 2
        run.assert_awaited_once_with(maturity_sweep.task_session_maker)
        mock_redis.set.assert_awaited_once()
        mock_redis.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_skips_when_locked(self, mock_redis) -> None:
        mock_redis.set = AsyncMock(return_value=None)
        with (
            patch.object(maturity_sweep, "get_redis_client", return_value=mock_redis),
            patch.object(maturity_sweep, "run_maturity_sweep", AsyncMock()) as run,
        ):
            result = await maturity_sweep._process_matured_investments_async()

        assert result is None
        run.assert_not_awaited()
        mock_redis.aclose.assert_awaited_once()
