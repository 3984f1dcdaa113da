"""
Referral commission repository.

Data access layer for ReferralCommission model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import CommissionKind
from app.models.referral_commission import ReferralCommission
from app.repositories.base import BaseRepository


class ReferralCommissionRepository(BaseRepository[ReferralCommission]):
    """Referral commission repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral commission repository."""
        super().__init__(ReferralCommission, session)

    async def has_qualification(
        self, referrer_id: str, from_user_id: str
    ) -> bool:
        """
        Check if the referred user already qualified for this referrer.

        Args:
            referrer_id: Referrer ID
            from_user_id: Referred user ID

        Returns:
            True if a qualification marker exists
        """
        return await self.exists(
            referrer_id=referrer_id,
            from_user_id=from_user_id,
            kind=CommissionKind.QUALIFICATION.value,
        )

    async def get_by_referrer(
        self, referrer_id: str
    ) -> list[ReferralCommission]:
        """Get commissions earned by a referrer, newest first."""
        return await self.find_all(referrer_id=referrer_id)

    async def get_total_earned(
        self, referrer_id: str | None = None
    ) -> Decimal:
        """
        Sum commission amounts.

        Args:
            referrer_id: Limit to one referrer, or None for all

        Returns:
            Total commission amount
        """
        stmt = select(func.sum(ReferralCommission.amount))
        if referrer_id:
            stmt = stmt.where(ReferralCommission.referrer_id == referrer_id)
        result = await self.session.execute(stmt)
        total = result.scalar()
        return Decimal(total) if total is not None else Decimal("0")
