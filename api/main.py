"""
API main entry point.

Builds the aiohttp application and runs it. Collaborators (settings,
session factory, rate limiter, token service) are injected so tests can
run the same app against an in-memory database.
"""

import sys
from pathlib import Path

from aiohttp import web
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.initialization.logging import setup_logging  # noqa: E402
from api.initialization.routes import register_all_routes  # noqa: E402
from api.initialization.scheduler import sweep_scheduler_ctx  # noqa: E402
from api.keys import (  # noqa: E402
    RATE_LIMITER_KEY,
    SESSION_MAKER_KEY,
    SETTINGS_KEY,
    TOKEN_SERVICE_KEY,
)
from api.middlewares import database_middleware, error_middleware  # noqa: E402
from app.config.database import async_session_maker  # noqa: E402
from app.config.settings import Settings, settings  # noqa: E402
from app.utils.rate_limiter import (  # noqa: E402
    InMemoryFixedWindowRateLimiter,
    RateLimiter,
    RedisFixedWindowRateLimiter,
)
from app.utils.redis_utils import get_redis_client  # noqa: E402
from app.utils.tokens import TokenService  # noqa: E402


def create_rate_limiter(config: Settings) -> RateLimiter:
    """Build the admin login limiter for the configured backend."""
    if config.rate_limiter_backend == "redis":
        return RedisFixedWindowRateLimiter(
            get_redis_client(config), config.admin_login_window_seconds
        )
    return InMemoryFixedWindowRateLimiter(config.admin_login_window_seconds)


def create_token_service(config: Settings) -> TokenService:
    """Build the token service from settings."""
    return TokenService(
        secret_key=config.secret_key,
        user_ttl_seconds=config.user_token_ttl_seconds,
        admin_ttl_seconds=config.admin_token_ttl_seconds,
    )


def create_app(
    config: Settings = settings,
    session_maker: async_sessionmaker[AsyncSession] | None = None,
    rate_limiter: RateLimiter | None = None,
    token_service: TokenService | None = None,
) -> web.Application:
    """
    Build the API application.

    Args:
        config: Application settings
        session_maker: Session factory, the shared pool if omitted
        rate_limiter: Admin login limiter, built from settings if omitted
        token_service: Token issuer, built from settings if omitted

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[error_middleware, database_middleware])
    app[SETTINGS_KEY] = config
    app[SESSION_MAKER_KEY] = session_maker or async_session_maker
    app[RATE_LIMITER_KEY] = rate_limiter or create_rate_limiter(config)
    app[TOKEN_SERVICE_KEY] = token_service or create_token_service(config)

    register_all_routes(app)
    app.cleanup_ctx.append(sweep_scheduler_ctx)
    return app


def main() -> None:
    """Run the API server."""
    setup_logging()
    logger.info(
        f"Lifecycle policy: {settings.lifecycle_policy.value}, "
        f"referral mode: {settings.referral_reward_mode.value}"
    )
    web.run_app(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        print=None,
    )


if __name__ == "__main__":
    main()
