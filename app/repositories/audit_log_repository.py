"""
Audit log repository.

Append-only access to the audit trail.
"""

import json
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import AUDIT_LOG_LIMIT
from app.models.audit_log import AuditLog
from app.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Audit log repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize audit log repository."""
        super().__init__(AuditLog, session)

    async def record(
        self,
        action: str,
        target_user_id: str | None = None,
        details: dict[str, Any] | str | None = None,
    ) -> AuditLog:
        """
        Append an audit entry.

        Args:
            action: Action name
            target_user_id: Affected user, if any
            details: Free text or a dict serialized as JSON

        Returns:
            Created entry
        """
        if isinstance(details, dict):
            details = json.dumps(details, default=str, sort_keys=True)
        return await self.create(
            action=action,
            target_user_id=target_user_id,
            details=details,
        )

    async def get_recent(
        self, limit: int = AUDIT_LOG_LIMIT
    ) -> list[AuditLog]:
        """Get most recent entries, newest first."""
        return await self.find_all(limit=limit)

    async def get_by_action(
        self,
        action: str,
        target_user_id: str | None = None,
        limit: int = AUDIT_LOG_LIMIT,
    ) -> list[AuditLog]:
        """Get most recent entries for an action, optionally for one user."""
        filters: dict[str, str] = {"action": action}
        if target_user_id:
            filters["target_user_id"] = target_user_id
        return await self.find_all(limit=limit, **filters)
