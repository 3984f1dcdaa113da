"""
Profit-share referral rewards.

Legacy reward mechanic. An investment opens at the investor's tier,
which follows the investor's own direct referral count, and that tier is
snapshotted as its profit rate. At maturity the investor earns the base
rate and the investor's referrer earns the spread between the snapshotted
tier and the base rate.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import get_profit_share_tier
from app.models.enums import AuditAction, CommissionKind
from app.models.investment import Investment
from app.models.referral_commission import ReferralCommission
from app.models.user import User
from app.repositories.referral_commission_repository import (
    ReferralCommissionRepository,
)
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService
from calculator import YieldCalculator, format_money


class ProfitShareRewarder(BaseService):
    """
    Pays referrer commissions at settlement.

    Never commits: runs inside the settlement transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        calculator: YieldCalculator | None = None,
    ) -> None:
        """Initialize rewarder."""
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.commission_repo = ReferralCommissionRepository(session)
        self.calculator = calculator or YieldCalculator()

    async def get_tier(self, user_id: str) -> int:
        """
        Get a user's current tier rate.

        Args:
            user_id: User whose direct referrals are counted

        Returns:
            Tier percent (10-13)
        """
        count = await self.user_repo.count_referrals(user_id)
        return get_profit_share_tier(count)

    async def reward_settlement(
        self, investment: Investment, investor: User
    ) -> ReferralCommission | None:
        """
        Credit the investor's referrer for a settled investment.

        Args:
            investment: Investment being settled
            investor: Owner of the investment

        Returns:
            Commission record, or None when nothing is owed
        """
        if not investor.referred_by:
            return None

        referrer = await self.user_repo.get_by_id(investor.referred_by)
        if referrer is None:
            self.logger.warning(
                "Referrer not found, no commission paid",
                extra={
                    "investment_id": investment.id,
                    "referred_by": investor.referred_by,
                },
            )
            return None

        tier = int(investment.profit_rate)
        share = self.calculator.calculate_referral_share(investment.amount, tier)
        if share <= Decimal("0"):
            return None

        await self.user_repo.adjust_balance(referrer.id, share)
        commission = await self.commission_repo.create(
            referrer_id=referrer.id,
            from_user_id=investor.id,
            investment_id=investment.id,
            kind=CommissionKind.PROFIT_SHARE.value,
            amount=share,
        )
        await self.audit.record(
            AuditAction.REFERRAL_COMMISSION_PAID,
            target_user_id=referrer.id,
            details={
                "investment_id": investment.id,
                "from_user_id": investor.id,
                "tier_percent": tier,
                "amount": format_money(share),
            },
        )

        self.logger.info(
            "Profit-share commission paid",
            extra={
                "referrer_id": referrer.id,
                "investment_id": investment.id,
                "tier_percent": tier,
                "amount": str(share),
            },
        )
        return commission
