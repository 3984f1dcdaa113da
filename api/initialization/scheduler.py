"""
API Initialization - Scheduler Module.

Runs the maturity sweep inside the API process when SWEEP_ENABLED is
set. Deployments with a separate scheduler process turn it off.
"""

from collections.abc import AsyncIterator

from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from api.keys import SESSION_MAKER_KEY, SETTINGS_KEY
from app.tasks.maturity_sweep_task import run_maturity_sweep


async def sweep_scheduler_ctx(app: web.Application) -> AsyncIterator[None]:
    """Start the sweep job with the app and stop it on cleanup."""
    config = app[SETTINGS_KEY]
    if not config.sweep_enabled:
        logger.info("In-process maturity sweep disabled")
        yield
        return

    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_maturity_sweep,
        IntervalTrigger(minutes=config.sweep_interval_minutes),
        args=[app[SESSION_MAKER_KEY]],
        id="maturity_sweep",
        name="Maturity sweep",
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(
        f"Maturity sweep scheduled every {config.sweep_interval_minutes} min"
    )

    yield

    scheduler.shutdown(wait=False)
    logger.info("Maturity sweep scheduler stopped")
