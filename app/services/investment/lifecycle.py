"""
Investment lifecycle manager.

Turns approved deposits into fixed-term investments. The deployment picks
one lifecycle policy:

- auto_invest: approval opens the investment immediately, balance is not
  touched.
- manual_invest: approval credits the deposit amount to the balance and
  the user opens the investment later, which debits it again.

Approval also runs the referral qualification engine when the deployment
uses qualification rewards. Everything an approval changes commits in
one transaction.
"""

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import INVESTMENT_TERM_HOURS
from app.config.settings import settings
from app.models.deposit import Deposit
from app.models.enums import (
    AuditAction,
    DepositStatus,
    LifecyclePolicy,
    ReferralRewardMode,
)
from app.models.investment import Investment
from app.models.user import User
from app.repositories.deposit_repository import DepositRepository
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService, log_operation, transaction
from app.services.referral.profit_share import ProfitShareRewarder
from app.services.referral.qualification_engine import (
    QualificationOutcome,
    ReferralQualificationEngine,
)
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    AlreadyInvestedError,
    ConflictError,
    ForbiddenError,
    InsufficientFundsError,
    NotApprovedError,
    NotFoundError,
)
from calculator import YieldCalculator, format_money


@dataclass
class ApprovalResult:
    """Result of approving a deposit."""

    deposit: Deposit
    investment: Investment | None = None
    qualification: QualificationOutcome | None = None


class InvestmentLifecycleManager(BaseService):
    """Creates investments from approved deposits."""

    def __init__(
        self,
        session: AsyncSession,
        policy: LifecyclePolicy | None = None,
        reward_mode: ReferralRewardMode | None = None,
        calculator: YieldCalculator | None = None,
    ) -> None:
        """
        Initialize lifecycle manager.

        Args:
            session: Async database session
            policy: Lifecycle policy, defaults to settings
            reward_mode: Referral reward mode, defaults to settings
            calculator: Yield calculator
        """
        super().__init__(session)
        self.policy = policy or settings.lifecycle_policy
        self.reward_mode = reward_mode or settings.referral_reward_mode
        self.calculator = calculator or YieldCalculator(INVESTMENT_TERM_HOURS)
        self.user_repo = UserRepository(session)
        self.deposit_repo = DepositRepository(session)
        self.investment_repo = InvestmentRepository(session)
        self.qualification_engine = ReferralQualificationEngine(session)
        self.profit_share = ProfitShareRewarder(session, self.calculator)

    @log_operation
    @transaction
    async def approve_deposit(self, deposit_id: str) -> ApprovalResult:
        """
        Approve a pending deposit and apply its consequences.

        Args:
            deposit_id: Deposit ID

        Returns:
            ApprovalResult with the deposit, the investment opened (auto
            policy) and the referral qualification outcome

        Raises:
            NotFoundError: If the deposit or its owner does not exist
            ConflictError: If the deposit was already reviewed
        """
        deposit = await self.deposit_repo.get_by_id(deposit_id, for_update=True)
        if not deposit:
            raise NotFoundError("Deposit not found")

        transitioned = await self.deposit_repo.transition_status(
            deposit_id,
            DepositStatus.PENDING.value,
            DepositStatus.APPROVED.value,
            reviewed_at=utc_now(),
        )
        if not transitioned:
            raise ConflictError(f"Deposit is already {deposit.status}")

        deposit = await self.deposit_repo.get_by_id(deposit_id, fresh=True)
        user = await self.get_user_or_raise(deposit.user_id, fresh=True)
        result = ApprovalResult(deposit=deposit)

        if self.policy == LifecyclePolicy.AUTO_INVEST:
            if await self.investment_repo.exists_for_deposit(deposit_id):
                self.logger.warning(
                    "Investment already exists for deposit, not opening another",
                    extra={"deposit_id": deposit_id},
                )
            else:
                result.investment = await self._open_investment(user, deposit)
        else:
            await self.user_repo.adjust_balance(user.id, deposit.amount)
            await self.audit.record(
                AuditAction.DEPOSIT_CREDITED,
                target_user_id=user.id,
                details={
                    "deposit_id": deposit_id,
                    "amount": format_money(deposit.amount),
                },
            )

        if (
            self.reward_mode == ReferralRewardMode.QUALIFICATION
            and user.referred_by
        ):
            result.qualification = await self.qualification_engine.evaluate(
                user, deposit
            )

        await self.audit.record(
            AuditAction.DEPOSIT_APPROVED,
            target_user_id=user.id,
            details={
                "deposit_id": deposit_id,
                "amount": format_money(deposit.amount),
                "policy": self.policy.value,
                "investment_id": result.investment.id if result.investment else None,
                "referral": result.qualification.notes if result.qualification else [],
            },
        )

        self.logger.info(
            "Deposit approved",
            extra={
                "deposit_id": deposit_id,
                "user_id": user.id,
                "amount": str(deposit.amount),
                "policy": self.policy.value,
            },
        )
        return result

    @transaction
    async def start_investment(self, user_id: str, deposit_id: str) -> Investment:
        """
        Open an investment from an approved deposit (manual policy).

        Debits the deposit amount that approval credited to the balance.

        Args:
            user_id: Caller
            deposit_id: Deposit to invest

        Returns:
            Created investment

        Raises:
            ConflictError: If the deployment opens investments automatically
            NotFoundError: If the deposit does not exist
            ForbiddenError: If the caller does not own the deposit
            NotApprovedError: If the deposit is not approved
            AlreadyInvestedError: If an investment already references it
            InsufficientFundsError: If the credited funds were withdrawn
        """
        if self.policy != LifecyclePolicy.MANUAL_INVEST:
            raise ConflictError("Investments start automatically on approval")

        deposit = await self.deposit_repo.get_by_id(deposit_id, for_update=True)
        if not deposit:
            raise NotFoundError("Deposit not found")
        if deposit.user_id != user_id:
            raise ForbiddenError("Not your deposit")
        if deposit.status != DepositStatus.APPROVED.value:
            raise NotApprovedError("Deposit not approved")
        if await self.investment_repo.exists_for_deposit(deposit_id):
            raise AlreadyInvestedError("Investment already started for this deposit")

        user = await self.get_user_or_raise(user_id, require_active=True, fresh=True)

        debited = await self.user_repo.debit_if_sufficient(user_id, deposit.amount)
        if not debited:
            raise InsufficientFundsError(
                "Balance no longer covers this deposit"
            )

        return await self._open_investment(user, deposit)

    async def get_available_deposits(self, user_id: str) -> list[Deposit]:
        """Get approved deposits of user without an investment."""
        return await self.deposit_repo.get_available_for_investment(user_id)

    async def get_user_investments(self, user_id: str) -> list[Investment]:
        """Get user's investments, newest first."""
        return await self.investment_repo.get_by_user(user_id)

    async def list_investments(self) -> list[Investment]:
        """Get all investments with owners, newest first (admin)."""
        return await self.investment_repo.find_all_with_user()

    async def rate_for(self, user: User) -> int:
        """
        Get the rate a new investment of user is snapshotted at.

        Under profit-share rewards this is the investor's own tier; the
        investor is still paid the base rate and the referrer the spread.

        Args:
            user: Investing user, freshly loaded

        Returns:
            Yield percent
        """
        if self.reward_mode == ReferralRewardMode.PROFIT_SHARE:
            return await self.profit_share.get_tier(user.id)
        return user.total_yield_percent

    async def _open_investment(self, user: User, deposit: Deposit) -> Investment:
        terms = self.calculator.build_terms(
            deposit.amount, await self.rate_for(user), utc_now()
        )

        try:
            investment = await self.investment_repo.create(
                user_id=user.id,
                deposit_id=deposit.id,
                amount=terms.amount,
                profit_rate=terms.rate_percent,
                started_at=terms.started_at,
                matures_at=terms.matures_at,
            )
        except IntegrityError as e:
            # Unique deposit_id: a concurrent call opened it first
            raise AlreadyInvestedError(
                "Investment already started for this deposit"
            ) from e

        await self.audit.record(
            AuditAction.INVESTMENT_STARTED,
            target_user_id=user.id,
            details={
                "investment_id": investment.id,
                "deposit_id": deposit.id,
                "amount": format_money(terms.amount),
                "profit_rate": str(terms.rate_percent),
                "matures_at": terms.matures_at.isoformat(),
            },
        )

        self.logger.info(
            "Investment started",
            extra={
                "investment_id": investment.id,
                "user_id": user.id,
                "amount": str(terms.amount),
                "profit_rate": str(terms.rate_percent),
            },
        )
        return investment
