"""
Maturity sweep actor.

Out-of-band sweep runs, enqueued from the admin endpoint. Never retried:
a failed settlement stays unpaid and is picked up by the next run.
"""

import dramatiq
from loguru import logger

from app.tasks.maturity_sweep_task import run_maturity_sweep
from app.utils.distributed_lock import DistributedLock
from app.utils.redis_utils import get_redis_client
from jobs.async_runner import run_async
from jobs.broker import broker  # noqa: F401  registers the broker
from jobs.utils.database import task_session_maker

SWEEP_LOCK_KEY = "maturity_sweep"
SWEEP_LOCK_TIMEOUT = 300


@dramatiq.actor(max_retries=0, time_limit=600_000)  # must exceed lock timeout
def process_matured_investments() -> None:
    """Settle all matured investments."""
    logger.info("Maturity sweep requested")
    result = run_async(_process_matured_investments_async())
    if result is None:
        return
    logger.info("Maturity sweep actor finished", extra=result)


async def _process_matured_investments_async() -> dict | None:
    """Run the sweep under the distributed lock."""
    redis_client = get_redis_client()
    lock = DistributedLock(redis_client=redis_client)

    try:
        async with lock.lock(SWEEP_LOCK_KEY, timeout=SWEEP_LOCK_TIMEOUT) as acquired:
            if not acquired:
                logger.info("Another sweep is running, skipping")
                return None

            report = await run_maturity_sweep(task_session_maker)
            return report.as_dict() if report else None
    finally:
        await redis_client.aclose()
