"""
Integration tests for audit trail retrieval.
"""

import pytest

from app.config.business_constants import AUDIT_LOG_LIMIT
from app.models.enums import AuditAction
from app.repositories.audit_log_repository import AuditLogRepository


@pytest.fixture
def record_many(session):
    async def _record(action: str, count: int, target_user_id: str | None = None) -> None:
        repo = AuditLogRepository(session)
        for _ in range(count):
            await repo.record(action, target_user_id=target_user_id)
        await session.commit()

    return _record


class TestAuditLogRetrieval:
    """Audit reads are bounded to the most recent entries."""

    @pytest.mark.asyncio
    async def test_recent_is_bounded(self, session, record_many) -> None:
        await record_many(AuditAction.USER_BLOCKED.value, AUDIT_LOG_LIMIT + 50)

        entries = await AuditLogRepository(session).get_recent()

        assert len(entries) == AUDIT_LOG_LIMIT

    @pytest.mark.asyncio
    async def test_by_action_is_bounded(self, session, record_many) -> None:
        await record_many(AuditAction.USER_BLOCKED.value, AUDIT_LOG_LIMIT + 50)

        entries = await AuditLogRepository(session).get_by_action(
            AuditAction.USER_BLOCKED.value
        )

        assert len(entries) == AUDIT_LOG_LIMIT

    @pytest.mark.asyncio
    async def test_by_action_filters(self, session, create_user, record_many) -> None:
        user = await create_user()
        await record_many(AuditAction.USER_BLOCKED.value, 3, user.id)
        await record_many(AuditAction.USER_BLOCKED.value, 2)
        await record_many(AuditAction.USER_UNBLOCKED.value, 4, user.id)

        repo = AuditLogRepository(session)
        for_user = await repo.get_by_action(AuditAction.USER_BLOCKED.value, user.id)
        limited = await repo.get_by_action(AuditAction.USER_UNBLOCKED.value, limit=2)

        assert len(for_user) == 3
        assert all(entry.target_user_id == user.id for entry in for_user)
        assert len(limited) == 2
