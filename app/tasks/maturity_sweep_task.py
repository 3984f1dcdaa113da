"""
Maturity sweep task.

Settles every investment whose term has elapsed. Called by the API's
in-process scheduler, the standalone scheduler and the dramatiq actor.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.database import async_session_maker
from app.services.investment.settlement import MaturitySweep, SweepReport


async def run_maturity_sweep(
    session_maker: Callable[[], AsyncSession] = async_session_maker,
) -> SweepReport | None:
    """
    Run one maturity sweep.

    Args:
        session_maker: Session factory, the app's default pool if omitted

    Returns:
        SweepReport, or None if the sweep could not start
    """
    logger.info("Starting maturity sweep")

    try:
        report = await MaturitySweep(session_maker).run()
    except Exception as e:
        # Listing failed (database down); the next tick retries
        logger.error(
            "Fatal error in maturity sweep",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        return None

    if report.failed:
        logger.warning(
            f"Maturity sweep finished with {report.failed} failures",
            extra={"failed_ids": report.failed_ids},
        )
    return report
