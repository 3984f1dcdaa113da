"""
Investment repository.

Data access layer for Investment model, including the settlement claim
that makes maturity payouts exactly-once.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.enums import InvestmentStatus
from app.models.investment import Investment
from app.repositories.base import BaseRepository


class InvestmentRepository(BaseRepository[Investment]):
    """Investment repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment repository."""
        super().__init__(Investment, session)

    async def exists_for_deposit(self, deposit_id: str) -> bool:
        """
        Check if an investment already references the deposit.

        Args:
            deposit_id: Deposit ID

        Returns:
            True if one exists
        """
        return await self.exists(deposit_id=deposit_id)

    async def get_by_user(self, user_id: str) -> list[Investment]:
        """Get investments by user, newest first."""
        stmt = (
            select(Investment)
            .where(Investment.user_id == user_id)
            .order_by(Investment.started_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_all_with_user(
        self, limit: int | None = None
    ) -> list[Investment]:
        """Get investments with owners loaded, newest first."""
        stmt = (
            select(Investment)
            .options(selectinload(Investment.user))
            .order_by(Investment.started_at.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_matured_unpaid_ids(self, now: datetime) -> list[str]:
        """
        Get IDs of investments due for settlement.

        Args:
            now: Reference time

        Returns:
            IDs of active, unpaid investments with matures_at <= now,
            oldest maturity first
        """
        stmt = (
            select(Investment.id)
            .where(
                Investment.status == InvestmentStatus.ACTIVE.value,
                Investment.profit_paid.is_(False),
                Investment.matures_at <= now,
            )
            .order_by(Investment.matures_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def claim_for_settlement(
        self, investment_id: str, now: datetime
    ) -> bool:
        """
        Mark a matured investment paid and completed if nobody has yet.

        Args:
            investment_id: Investment ID
            now: Completion time, the term must have elapsed by then

        Returns:
            True only for the caller that performed the transition
        """
        stmt = (
            update(Investment)
            .where(
                Investment.id == investment_id,
                Investment.profit_paid.is_(False),
                Investment.status == InvestmentStatus.ACTIVE.value,
                Investment.matures_at <= now,
            )
            .values(
                profit_paid=True,
                status=InvestmentStatus.COMPLETED.value,
                completed_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def count_active(self) -> int:
        """Count active investments."""
        return await self.count(status=InvestmentStatus.ACTIVE.value)

    async def get_completed_since(
        self, since: datetime
    ) -> list[Investment]:
        """
        Get investments settled at or after a moment.

        Args:
            since: Lower bound for completed_at

        Returns:
            List of completed investments
        """
        stmt = select(Investment).where(
            Investment.status == InvestmentStatus.COMPLETED.value,
            Investment.completed_at >= since,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_total_active_amount(self) -> Decimal:
        """Sum principal of active investments."""
        stmt = select(func.sum(Investment.amount)).where(
            Investment.status == InvestmentStatus.ACTIVE.value
        )
        result = await self.session.execute(stmt)
        total = result.scalar()
        return Decimal(total) if total is not None else Decimal("0")
