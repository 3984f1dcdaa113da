"""Database access for job workers."""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.config.database import create_engine, create_session_maker
from app.config.settings import settings


def create_task_engine() -> AsyncEngine:
    """Create an engine without pooling; worker loops come and go."""
    return create_engine(settings, poolclass=NullPool)


def create_task_session_maker(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Create the session maker used by job workers."""
    if engine is None:
        engine = create_task_engine()
    return create_session_maker(engine)


task_engine = create_task_engine()
task_session_maker = create_task_session_maker(task_engine)
