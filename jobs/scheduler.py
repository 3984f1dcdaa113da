"""
Standalone scheduler entry point.

Runs the maturity sweep on an interval in its own process, for
deployments that keep SWEEP_ENABLED off in the API.
"""

import asyncio
import signal
import sys
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config.settings import settings  # noqa: E402
from app.tasks.maturity_sweep_task import run_maturity_sweep  # noqa: E402
from jobs.health import start_health_server, stop_health_server  # noqa: E402
from jobs.utils.database import task_engine, task_session_maker  # noqa: E402

SWEEP_JOB_ID = "maturity_sweep"


def setup_logging() -> None:
    """Configure logger with file rotation."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    logger.add(
        "logs/scheduler.log",
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )


def create_scheduler() -> AsyncIOScheduler:
    """
    Build the scheduler with the sweep job.

    max_instances=1 keeps a slow sweep from overlapping the next tick.
    """
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_maturity_sweep,
        IntervalTrigger(minutes=settings.sweep_interval_minutes),
        args=[task_session_maker],
        id=SWEEP_JOB_ID,
        name="Maturity sweep",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler


async def main() -> None:
    """Run the scheduler until SIGINT/SIGTERM."""
    setup_logging()
    logger.info(
        f"Starting scheduler, sweep every {settings.sweep_interval_minutes} min"
    )

    scheduler = create_scheduler()
    scheduler.start()
    runner = await start_health_server(
        scheduler, task_session_maker, port=settings.health_check_port
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    # Sweep once on startup instead of waiting a full interval
    await run_maturity_sweep(task_session_maker)

    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down scheduler...")
        scheduler.shutdown(wait=False)
        await stop_health_server(runner)
        await task_engine.dispose()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        logger.exception(f"Scheduler crashed: {e}")
        sys.exit(1)
