"""
Withdrawal repository.

Data access layer for Withdrawal model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.withdrawal import Withdrawal
from app.repositories.base import BaseRepository


class WithdrawalRepository(BaseRepository[Withdrawal]):
    """Withdrawal repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal repository."""
        super().__init__(Withdrawal, session)

    async def get_by_user(self, user_id: str) -> list[Withdrawal]:
        """Get withdrawals by user, newest first."""
        return await self.find_all(user_id=user_id)

    async def find_all_with_user(
        self,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[Withdrawal]:
        """
        Get withdrawals with owners loaded, newest first.

        Args:
            status: Optional status filter
            limit: Max number of results

        Returns:
            List of withdrawals
        """
        stmt = select(Withdrawal).options(selectinload(Withdrawal.user))
        if status:
            stmt = stmt.where(Withdrawal.status == status)
        stmt = stmt.order_by(Withdrawal.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_total_by_status(self, status: str) -> Decimal:
        """Sum withdrawal amounts in a status."""
        stmt = select(func.sum(Withdrawal.amount)).where(
            Withdrawal.status == status
        )
        result = await self.session.execute(stmt)
        total = result.scalar()
        return Decimal(total) if total is not None else Decimal("0")
