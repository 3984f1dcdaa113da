"""
Referral qualification engine.

Evaluated inside the deposit approval transaction. A referred user
qualifies once, when their approved deposits first reach the threshold.
Qualification rewards the referrer (+1 yield point, milestone bonus) and
the referred user (welcome bonus, yield floor). Each reward is guarded by
its own one-shot flag so replays never pay twice.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    MILESTONE_BONUS_AMOUNT,
    MILESTONE_QUALIFIED_REFERRALS,
    QUALIFICATION_THRESHOLD,
    REFERRED_USER_YIELD_PERCENT,
    WELCOME_BONUS_AMOUNT,
)
from app.models.deposit import Deposit
from app.models.enums import AuditAction, CommissionKind
from app.models.user import User
from app.repositories.deposit_repository import DepositRepository
from app.repositories.referral_commission_repository import (
    ReferralCommissionRepository,
)
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService
from calculator import format_money


@dataclass
class QualificationOutcome:
    """What the engine applied for one approved deposit."""

    total_deposited: Decimal = Decimal("0")
    crossed_threshold: bool = False
    referrer_credited: bool = False
    milestone_bonus_paid: bool = False
    welcome_bonus_paid: bool = False
    notes: list[str] = field(default_factory=list)

    @property
    def applied(self) -> bool:
        """Check if any side effect was applied."""
        return (
            self.referrer_credited
            or self.milestone_bonus_paid
            or self.welcome_bonus_paid
        )


class ReferralQualificationEngine(BaseService):
    """
    Applies referral qualification side effects.

    Never commits: the caller owns the transaction so the approval and
    every reward land together.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize engine."""
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.deposit_repo = DepositRepository(session)
        self.commission_repo = ReferralCommissionRepository(session)

    async def evaluate(self, user: User, deposit: Deposit) -> QualificationOutcome:
        """
        Evaluate a freshly approved deposit.

        The deposit must already be approved in the current transaction so
        the total includes it.

        Args:
            user: Depositing user
            deposit: Deposit just approved

        Returns:
            QualificationOutcome describing the applied rewards
        """
        outcome = QualificationOutcome()
        if not user.referred_by:
            return outcome

        total = await self.deposit_repo.get_total_approved(user.id)
        outcome.total_deposited = total
        was_qualified_before = total - deposit.amount >= QUALIFICATION_THRESHOLD

        if total < QUALIFICATION_THRESHOLD or was_qualified_before:
            return outcome
        outcome.crossed_threshold = True

        referrer = await self.user_repo.get_by_id(user.referred_by)
        if referrer is None:
            self.logger.warning(
                "Referrer not found, skipping referrer rewards",
                extra={"user_id": user.id, "referred_by": user.referred_by},
            )
            outcome.notes.append("referrer missing")
        else:
            await self._credit_referrer(referrer.id, user, outcome)

        await self._pay_welcome_bonus(user, outcome)
        return outcome

    async def _credit_referrer(
        self,
        referrer_id: str,
        user: User,
        outcome: QualificationOutcome,
    ) -> None:
        if await self.commission_repo.has_qualification(referrer_id, user.id):
            outcome.notes.append("referral already counted")
            return

        await self.user_repo.increment_qualified_referrals(referrer_id)
        await self.commission_repo.create(
            referrer_id=referrer_id,
            from_user_id=user.id,
            investment_id=None,
            kind=CommissionKind.QUALIFICATION.value,
            amount=Decimal("0"),
        )

        referrer = await self.user_repo.get_by_id(referrer_id, fresh=True)
        outcome.referrer_credited = True
        outcome.notes.append(
            f"referrer qualified referrals {referrer.qualified_referrals}, "
            f"yield {referrer.total_yield_percent}%"
        )
        await self.audit.record(
            AuditAction.REFERRAL_QUALIFIED,
            target_user_id=referrer_id,
            details={
                "referred_user_id": user.id,
                "qualified_referrals": referrer.qualified_referrals,
                "total_yield_percent": referrer.total_yield_percent,
            },
        )
        self.logger.info(
            "Referral qualified",
            extra={
                "referrer_id": referrer_id,
                "referred_user_id": user.id,
                "qualified_referrals": referrer.qualified_referrals,
            },
        )

        if referrer.qualified_referrals >= MILESTONE_QUALIFIED_REFERRALS:
            await self._pay_milestone_bonus(referrer, outcome)

    async def _pay_milestone_bonus(
        self, referrer: User, outcome: QualificationOutcome
    ) -> None:
        claimed = await self.user_repo.claim_flag(referrer.id, "referral_bonus_paid")
        if not claimed:
            return

        await self.user_repo.adjust_balance(referrer.id, MILESTONE_BONUS_AMOUNT)
        outcome.milestone_bonus_paid = True
        outcome.notes.append(
            f"milestone bonus {format_money(MILESTONE_BONUS_AMOUNT)} paid"
        )
        await self.audit.record(
            AuditAction.REFERRAL_MILESTONE_BONUS,
            target_user_id=referrer.id,
            details={
                "amount": format_money(MILESTONE_BONUS_AMOUNT),
                "qualified_referrals": referrer.qualified_referrals,
            },
        )
        self.logger.info(
            "Referral milestone bonus paid",
            extra={
                "referrer_id": referrer.id,
                "amount": str(MILESTONE_BONUS_AMOUNT),
            },
        )

    async def _pay_welcome_bonus(
        self, user: User, outcome: QualificationOutcome
    ) -> None:
        claimed = await self.user_repo.claim_flag(user.id, "welcome_bonus_paid")
        if not claimed:
            return

        await self.user_repo.adjust_balance(user.id, WELCOME_BONUS_AMOUNT)
        await self.user_repo.raise_yield_to(user.id, REFERRED_USER_YIELD_PERCENT)
        outcome.welcome_bonus_paid = True
        outcome.notes.append(
            f"welcome bonus {format_money(WELCOME_BONUS_AMOUNT)} paid"
        )
        await self.audit.record(
            AuditAction.WELCOME_BONUS_PAID,
            target_user_id=user.id,
            details={
                "amount": format_money(WELCOME_BONUS_AMOUNT),
                "yield_floor": REFERRED_USER_YIELD_PERCENT,
            },
        )
        self.logger.info(
            "Welcome bonus paid",
            extra={"user_id": user.id, "amount": str(WELCOME_BONUS_AMOUNT)},
        )
