"""
Maturity settlement.

Settles matured investments exactly once. Each investment settles in its
own transaction that first claims the row with a conditional update
(profit_paid false -> true) and only then credits the payout. A second
sweep, or a concurrent one, finds the claim already taken and pays
nothing. A failure rolls back both the claim and the credit, leaving the
investment for the next run.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import BASE_YIELD_PERCENT, INVESTMENT_TERM_HOURS
from app.config.settings import settings
from app.models.enums import AuditAction, ReferralRewardMode
from app.models.investment import Investment
from app.models.referral_commission import ReferralCommission
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService, transaction
from app.services.referral.profit_share import ProfitShareRewarder
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import NotFoundError, is_transient
from calculator import SettlementBreakdown, YieldCalculator


@dataclass
class SettlementResult:
    """One settled investment."""

    investment_id: str
    user_id: str
    breakdown: SettlementBreakdown
    commission: ReferralCommission | None = None


@dataclass
class SweepReport:
    """Outcome of one sweep run."""

    found: int = 0
    settled: int = 0
    skipped: int = 0
    failed: int = 0
    total_payout: Decimal = Decimal("0")
    failed_ids: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        """Render report for logs and task results."""
        return {
            "found": self.found,
            "settled": self.settled,
            "skipped": self.skipped,
            "failed": self.failed,
            "total_payout": str(self.total_payout),
            "failed_ids": self.failed_ids,
        }


class InvestmentSettlementProcessor(BaseService):
    """Settles a single matured investment."""

    def __init__(
        self,
        session: AsyncSession,
        reward_mode: ReferralRewardMode | None = None,
        calculator: YieldCalculator | None = None,
    ) -> None:
        """
        Initialize processor.

        Args:
            session: Async database session
            reward_mode: Referral reward mode, defaults to settings
            calculator: Yield calculator
        """
        super().__init__(session)
        self.reward_mode = reward_mode or settings.referral_reward_mode
        self.calculator = calculator or YieldCalculator(INVESTMENT_TERM_HOURS)
        self.investment_repo = InvestmentRepository(session)
        self.user_repo = UserRepository(session)
        self.profit_share = ProfitShareRewarder(session, self.calculator)

    def investor_rate(self, investment: Investment) -> Decimal:
        """
        Get the rate the investor is paid at maturity.

        Profit-share investments carry the tier as their rate; the
        investor gets the base rate and the referrer the spread.
        """
        if self.reward_mode == ReferralRewardMode.PROFIT_SHARE:
            return Decimal(BASE_YIELD_PERCENT)
        return investment.profit_rate

    @transaction
    async def settle_investment(
        self, investment_id: str, now: datetime | None = None
    ) -> SettlementResult | None:
        """
        Pay out principal plus yield for a matured investment.

        Args:
            investment_id: Investment ID
            now: Settlement time, defaults to now

        Returns:
            SettlementResult, or None if the investment was already settled
            or has not matured yet

        Raises:
            NotFoundError: If the owner no longer exists (nothing is applied)
        """
        now = now or utc_now()

        claimed = await self.investment_repo.claim_for_settlement(investment_id, now)
        if not claimed:
            self.logger.debug(
                "Investment settled or not matured, skipping",
                extra={"investment_id": investment_id},
            )
            return None

        investment = await self.investment_repo.get_by_id(investment_id, fresh=True)
        investor = await self.user_repo.get_by_id(investment.user_id)
        if investor is None:
            raise NotFoundError("Investment owner not found")

        breakdown = self.calculator.settle(
            investment.amount, self.investor_rate(investment)
        )
        await self.user_repo.adjust_balance(investor.id, breakdown.payout)

        await self.audit.record(
            AuditAction.INVESTMENT_MATURED,
            target_user_id=investor.id,
            details={"investment_id": investment_id, **breakdown.as_details()},
        )

        commission = None
        if self.reward_mode == ReferralRewardMode.PROFIT_SHARE:
            commission = await self.profit_share.reward_settlement(
                investment, investor
            )

        self.logger.info(
            "Investment matured and paid",
            extra={
                "investment_id": investment_id,
                "user_id": investor.id,
                "principal": str(breakdown.principal),
                "profit": str(breakdown.profit),
                "payout": str(breakdown.payout),
            },
        )
        return SettlementResult(
            investment_id=investment_id,
            user_id=investor.id,
            breakdown=breakdown,
            commission=commission,
        )


class MaturitySweep:
    """
    Finds matured unpaid investments and settles each one.

    Uses a fresh session per investment so one failure cannot poison the
    others.
    """

    def __init__(
        self,
        session_maker: Callable[[], AsyncSession],
        reward_mode: ReferralRewardMode | None = None,
        calculator: YieldCalculator | None = None,
    ) -> None:
        """
        Initialize sweep.

        Args:
            session_maker: Factory for async sessions
            reward_mode: Referral reward mode, defaults to settings
            calculator: Yield calculator
        """
        self.session_maker = session_maker
        self.reward_mode = reward_mode or settings.referral_reward_mode
        self.calculator = calculator or YieldCalculator(INVESTMENT_TERM_HOURS)
        self.logger = logger.bind(service=self.__class__.__name__)

    async def run(self, now: datetime | None = None) -> SweepReport:
        """
        Run one sweep.

        Args:
            now: Reference time, defaults to now

        Returns:
            SweepReport with counts and total payout
        """
        now = now or utc_now()
        report = SweepReport()

        async with self.session_maker() as session:
            investment_ids = await InvestmentRepository(
                session
            ).get_matured_unpaid_ids(now)

        report.found = len(investment_ids)
        if not investment_ids:
            self.logger.debug("No matured investments")
            return report

        self.logger.info(f"Settling {report.found} matured investments")

        for investment_id in investment_ids:
            try:
                async with self.session_maker() as session:
                    processor = InvestmentSettlementProcessor(
                        session, self.reward_mode, self.calculator
                    )
                    result = await processor.settle_investment(investment_id, now)
            except Exception as e:
                report.failed += 1
                report.failed_ids.append(investment_id)
                self.logger.error(
                    "Settlement failed, will retry on next run",
                    extra={
                        "investment_id": investment_id,
                        "error": str(e),
                        "error_type": type(e).__name__,
                        "transient": is_transient(e),
                    },
                )
                continue

            if result is None:
                report.skipped += 1
            else:
                report.settled += 1
                report.total_payout += result.breakdown.payout

        self.logger.info("Maturity sweep complete", extra=report.as_dict())
        return report
