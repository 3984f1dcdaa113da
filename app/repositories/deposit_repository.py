"""
Deposit repository.

Data access layer for Deposit model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.deposit import Deposit
from app.models.enums import DepositStatus
from app.models.investment import Investment
from app.repositories.base import BaseRepository


class DepositRepository(BaseRepository[Deposit]):
    """Deposit repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize deposit repository."""
        super().__init__(Deposit, session)

    async def get_by_user(
        self, user_id: str, status: str | None = None
    ) -> list[Deposit]:
        """
        Get deposits by user, newest first.

        Args:
            user_id: User ID
            status: Optional status filter

        Returns:
            List of deposits
        """
        filters: dict[str, str] = {"user_id": user_id}
        if status:
            filters["status"] = status

        return await self.find_all(**filters)

    async def get_total_approved(self, user_id: str) -> Decimal:
        """
        Get total approved deposit amount for user.

        Args:
            user_id: User ID

        Returns:
            Sum of approved deposits
        """
        stmt = select(func.sum(Deposit.amount)).where(
            Deposit.user_id == user_id,
            Deposit.status == DepositStatus.APPROVED.value,
        )
        result = await self.session.execute(stmt)
        total = result.scalar()
        return Decimal(total) if total is not None else Decimal("0")

    async def get_available_for_investment(
        self, user_id: str
    ) -> list[Deposit]:
        """
        Get approved deposits that have no investment yet.

        Args:
            user_id: Owner ID

        Returns:
            List of deposits
        """
        invested = select(Investment.deposit_id)
        stmt = (
            select(Deposit)
            .where(
                Deposit.user_id == user_id,
                Deposit.status == DepositStatus.APPROVED.value,
                Deposit.id.not_in(invested),
            )
            .order_by(Deposit.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_all_with_user(
        self,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[Deposit]:
        """
        Get deposits with their owners loaded, newest first.

        Args:
            status: Optional status filter
            limit: Max number of results

        Returns:
            List of deposits
        """
        stmt = select(Deposit).options(selectinload(Deposit.user))
        if status:
            stmt = stmt.where(Deposit.status == status)
        stmt = stmt.order_by(Deposit.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_total_by_status(self, status: str) -> Decimal:
        """Sum deposit amounts in a status."""
        stmt = select(func.sum(Deposit.amount)).where(
            Deposit.status == status
        )
        result = await self.session.execute(stmt)
        total = result.scalar()
        return Decimal(total) if total is not None else Decimal("0")
