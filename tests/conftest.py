"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

import bcrypt

ADMIN_PASSWORD = "admin-password-for-tests"

# Minimal environment for tests; settings are read at import time
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test_secret_key_for_testing_only_0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault(
    "ADMIN_PASSWORD_HASH",
    bcrypt.hashpw(ADMIN_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode(),
)
os.environ.setdefault("PLATFORM_WALLET_ADDRESS", "TLfixnZVqzmTp2UhQwHjPiiV9eK3NemLy7")
os.environ.setdefault("SWEEP_ENABLED", "false")
os.environ.setdefault("LOG_FILE", "logs/test.log")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import UTC, datetime, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.config.database import create_session_maker  # noqa: E402
from app.models import (  # noqa: E402
    AuditLog,
    Base,
    Deposit,
    DepositStatus,
    Investment,
    User,
)


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    """Session factory bound to the test engine."""
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    """Session for the code under test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def create_user(session_maker):
    """Factory: insert a committed user."""
    counter = {"n": 0}

    async def _create(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        data = {
            "full_name": f"Test User {n}",
            "email": f"user{n}@example.com",
            "referral_code": f"YLDT{n:04d}",
            "balance": Decimal("0"),
        }
        data.update(overrides)
        user = User(**data)
        user.set_password("password123", rounds=4)
        async with session_maker() as s:
            s.add(user)
            await s.commit()
        return user

    return _create


@pytest.fixture
def create_deposit(session_maker):
    """Factory: insert a committed deposit."""

    async def _create(user: User, amount: str | Decimal = "100", **overrides) -> Deposit:
        data = {
            "user_id": user.id,
            "amount": Decimal(amount),
            "txid": "tx-" + user.id[:8],
            "screenshot_url": "https://img.example.com/proof.png",
            "status": DepositStatus.PENDING.value,
        }
        data.update(overrides)
        deposit = Deposit(**data)
        async with session_maker() as s:
            s.add(deposit)
            await s.commit()
        return deposit

    return _create


@pytest.fixture
def create_investment(session_maker, create_deposit):
    """Factory: insert an approved deposit with an active investment."""

    async def _create(
        user: User,
        amount: str | Decimal = "100",
        rate: str | Decimal = "10",
        matured: bool = True,
    ) -> Investment:
        deposit = await create_deposit(
            user, amount, status=DepositStatus.APPROVED.value
        )
        started = datetime.now(UTC) - timedelta(hours=73 if matured else 1)
        investment = Investment(
            user_id=user.id,
            deposit_id=deposit.id,
            amount=Decimal(amount),
            profit_rate=Decimal(rate),
            started_at=started,
            matures_at=started + timedelta(hours=72),
        )
        async with session_maker() as s:
            s.add(investment)
            await s.commit()
        return investment

    return _create


@pytest.fixture
def reload_user(session_maker):
    """Read a user back from the database."""

    async def _reload(user_id: str) -> User:
        async with session_maker() as s:
            return await s.get(User, user_id)

    return _reload


@pytest.fixture
def mock_redis():
    """Mock redis.asyncio client."""
    redis = AsyncMock()
    redis.set = AsyncMock(return_value=True)
    redis.get = AsyncMock(return_value=None)
    redis.incr = AsyncMock(return_value=1)
    redis.expire = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.eval = AsyncMock(return_value=1)
    redis.aclose = AsyncMock()
    return redis


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def admin_password() -> str:
    """Plain text admin password matching ADMIN_PASSWORD_HASH."""
    return ADMIN_PASSWORD


@pytest.fixture
def audit_actions(session_maker):
    """List audit actions recorded so far, oldest first."""

    async def _actions(target_user_id: str | None = None) -> list[str]:
        stmt = select(AuditLog).order_by(AuditLog.created_at, AuditLog.id)
        if target_user_id:
            stmt = stmt.where(AuditLog.target_user_id == target_user_id)
        async with session_maker() as s:
            result = await s.execute(stmt)
            return [entry.action for entry in result.scalars().all()]

    return _actions
