"""
Health check server for the scheduler process.

/health reports scheduler state and jobs, /health/ready also checks the
database, /health/live only proves the process answers.
"""

import asyncio

from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

SCHEDULER_KEY = web.AppKey("scheduler", AsyncIOScheduler)
SESSION_MAKER_KEY = web.AppKey("session_maker", async_sessionmaker[AsyncSession])


async def health_handler(request: web.Request) -> web.Response:
    """
    Health check endpoint.

    Returns:
        JSON response with scheduler status
    """
    scheduler = request.app[SCHEDULER_KEY]
    jobs = [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": (
                job.next_run_time.isoformat() if job.next_run_time else None
            ),
        }
        for job in scheduler.get_jobs()
    ]

    return web.json_response(
        {
            "status": "healthy" if scheduler.running else "stopped",
            "scheduler_running": scheduler.running,
            "jobs_count": len(jobs),
            "jobs": jobs,
        },
        status=200 if scheduler.running else 503,
    )


async def readiness_handler(request: web.Request) -> web.Response:
    """
    Readiness check endpoint.

    Returns:
        200 when the scheduler runs and the database answers
    """
    if not request.app[SCHEDULER_KEY].running:
        return web.json_response({"status": "not_ready", "ready": False}, status=503)

    try:
        async with request.app[SESSION_MAKER_KEY]() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Readiness check failed: {type(e).__name__}")
        return web.json_response(
            {"status": "not_ready", "ready": False, "database": "unavailable"},
            status=503,
        )

    return web.json_response({"status": "ready", "ready": True})


async def liveness_handler(request: web.Request) -> web.Response:
    """Liveness check endpoint."""
    return web.json_response({"status": "alive", "alive": True})


def create_health_app(
    scheduler: AsyncIOScheduler,
    session_maker: async_sessionmaker[AsyncSession],
) -> web.Application:
    """
    Build the health check application.

    Args:
        scheduler: Scheduler to report on
        session_maker: Session factory used by the readiness probe

    Returns:
        aiohttp application
    """
    app = web.Application()
    app[SCHEDULER_KEY] = scheduler
    app[SESSION_MAKER_KEY] = session_maker
    app.router.add_get("/health", health_handler)
    app.router.add_get("/health/ready", readiness_handler)
    app.router.add_get("/health/live", liveness_handler)
    return app


async def start_health_server(
    scheduler: AsyncIOScheduler,
    session_maker: async_sessionmaker[AsyncSession],
    host: str = "0.0.0.0",
    port: int = 8081,
) -> web.AppRunner:
    """
    Start health check server.

    Args:
        scheduler: Scheduler to report on
        session_maker: Session factory used by the readiness probe
        host: Host to bind to
        port: Port to bind to

    Returns:
        AppRunner for cleanup
    """
    runner = web.AppRunner(create_health_app(scheduler, session_maker))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Health check server started on {host}:{port}")
    return runner


async def stop_health_server(runner: web.AppRunner, timeout: int = 5) -> None:
    """
    Stop health check server.

    Args:
        runner: AppRunner to clean up
        timeout: Seconds to wait for cleanup
    """
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("Health check server stopped")
    except TimeoutError:
        logger.warning(f"Health check server cleanup timed out after {timeout}s")
