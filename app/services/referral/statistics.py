"""
Referral statistics module.

Builds the referral summary shown to users and the commission listings
shown to admins.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    MAX_YIELD_PERCENT,
    QUALIFICATION_THRESHOLD,
    get_profit_share_tier,
)
from app.models.enums import ReferralRewardMode
from app.models.referral_commission import ReferralCommission
from app.repositories.deposit_repository import DepositRepository
from app.repositories.referral_commission_repository import (
    ReferralCommissionRepository,
)
from app.repositories.user_repository import UserRepository
from app.utils.exceptions import NotFoundError


class ReferralStatisticsManager:
    """Manages referral statistics."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize statistics manager."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.deposit_repo = DepositRepository(session)
        self.commission_repo = ReferralCommissionRepository(session)

    async def get_summary(
        self,
        user_id: str,
        mode: ReferralRewardMode = ReferralRewardMode.QUALIFICATION,
    ) -> dict[str, Any]:
        """
        Get referral summary for user.

        Args:
            user_id: User ID
            mode: Deployment's referral reward mode

        Returns:
            Dict with referral code, counters, bonus flags and the list of
            referred users with their approved deposit totals
        """
        user = await self.user_repo.get_by_id(user_id, fresh=True)
        if not user:
            raise NotFoundError("User not found")

        referrals = await self.user_repo.get_referrals(user_id)
        totals = await self.user_repo.get_deposit_totals_for_referrals(user_id)
        own_total = await self.deposit_repo.get_total_approved(user_id)

        referral_rows = []
        for referral in referrals:
            deposited = totals.get(referral.id, Decimal("0"))
            referral_rows.append({
                "id": referral.id,
                "full_name": referral.full_name,
                "created_at": referral.created_at,
                "total_deposited": deposited,
                "is_qualified": deposited >= QUALIFICATION_THRESHOLD,
            })

        summary: dict[str, Any] = {
            "mode": mode.value,
            "referral_code": user.referral_code,
            "total_referrals": len(referrals),
            "qualified_referrals": user.qualified_referrals,
            "current_yield": user.total_yield_percent,
            "max_yield": MAX_YIELD_PERCENT,
            "referral_bonus_paid": user.referral_bonus_paid,
            "is_referred": user.referred_by is not None,
            "has_qualified_deposit": own_total >= QUALIFICATION_THRESHOLD,
            "welcome_bonus_paid": user.welcome_bonus_paid,
            "referrals": referral_rows,
        }

        if mode == ReferralRewardMode.PROFIT_SHARE:
            summary["tier_percent"] = get_profit_share_tier(len(referrals))
            summary["total_commission"] = (
                await self.commission_repo.get_total_earned(user_id)
            )

        return summary

    async def get_commissions(
        self, referrer_id: str | None = None
    ) -> list[ReferralCommission]:
        """
        Get commission records, newest first.

        Args:
            referrer_id: Limit to one referrer, or None for all

        Returns:
            List of commissions
        """
        if referrer_id:
            return await self.commission_repo.get_by_referrer(referrer_id)
        return await self.commission_repo.find_all()
