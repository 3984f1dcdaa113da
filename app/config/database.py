"""
Database engine and session factory.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import Pool

from app.config.settings import Settings, settings


def create_engine(
    config: Settings = settings,
    poolclass: type[Pool] | None = None,
) -> AsyncEngine:
    """
    Create async engine with pool and timeout settings.

    Args:
        config: Application settings
        poolclass: Pool override (job workers pass NullPool)

    Returns:
        Configured AsyncEngine
    """
    if config.database_url.startswith("sqlite"):
        return create_async_engine(
            config.database_url,
            echo=config.database_echo,
        )

    connect_args = {
        "command_timeout": config.database_command_timeout,
        "timeout": config.database_pool_timeout,
    }
    if poolclass is not None:
        return create_async_engine(
            config.database_url,
            echo=config.database_echo,
            poolclass=poolclass,
            connect_args=connect_args,
        )

    return create_async_engine(
        config.database_url,
        echo=config.database_echo,
        pool_size=config.database_pool_size,
        max_overflow=config.database_max_overflow,
        pool_timeout=config.database_pool_timeout,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_maker(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async_engine = create_engine()
async_session_maker = create_session_maker(async_engine)
