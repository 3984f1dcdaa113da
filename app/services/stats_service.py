"""
Platform statistics for the admin console.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import BASE_YIELD_PERCENT
from app.config.settings import settings
from app.models.enums import DepositStatus, ReferralRewardMode, WithdrawalStatus
from app.repositories.deposit_repository import DepositRepository
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.referral_commission_repository import (
    ReferralCommissionRepository,
)
from app.repositories.user_repository import UserRepository
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.utils.datetime_utils import utc_day_start
from calculator import YieldCalculator


class StatsService:
    """Aggregates platform-wide figures."""

    def __init__(
        self,
        session: AsyncSession,
        reward_mode: ReferralRewardMode | None = None,
    ) -> None:
        """Initialize stats service."""
        self.session = session
        self.reward_mode = reward_mode or settings.referral_reward_mode
        self.user_repo = UserRepository(session)
        self.deposit_repo = DepositRepository(session)
        self.investment_repo = InvestmentRepository(session)
        self.withdrawal_repo = WithdrawalRepository(session)
        self.commission_repo = ReferralCommissionRepository(session)
        self.calculator = YieldCalculator()

    async def get_platform_stats(self) -> dict[str, Any]:
        """
        Get platform statistics.

        Returns:
            Dict with user count, deposit/withdrawal volumes, pending
            queues, active investments, profit settled today and total
            referral earnings
        """
        settled_today = await self.investment_repo.get_completed_since(
            utc_day_start()
        )
        today_profit = sum(
            (
                self.calculator.calculate_profit(inv.amount, self._paid_rate(inv))
                for inv in settled_today
            ),
            Decimal("0"),
        )

        return {
            "total_users": await self.user_repo.count(),
            "total_deposits": await self.deposit_repo.get_total_by_status(
                DepositStatus.APPROVED.value
            ),
            "total_withdrawals": await self.withdrawal_repo.get_total_by_status(
                WithdrawalStatus.PROCESSED.value
            ),
            "active_investments": await self.investment_repo.count_active(),
            "active_investment_volume": (
                await self.investment_repo.get_total_active_amount()
            ),
            "pending_deposits": await self.deposit_repo.count(
                status=DepositStatus.PENDING.value
            ),
            "pending_withdrawals": await self.withdrawal_repo.count(
                status=WithdrawalStatus.PENDING.value
            ),
            "today_profit": today_profit,
            "total_referral_earnings": await self.commission_repo.get_total_earned(),
        }

    def _paid_rate(self, investment) -> Decimal:
        # Profit-share investments store the tier; the investor got the base rate
        if self.reward_mode == ReferralRewardMode.PROFIT_SHARE:
            return Decimal(BASE_YIELD_PERCENT)
        return investment.profit_rate
