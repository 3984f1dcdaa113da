"""
Deposit service.

Records user-submitted deposit claims and admin rejections. Approval
lives in the investment lifecycle manager because it opens investments.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import MIN_DEPOSIT_AMOUNT
from app.models.deposit import Deposit
from app.models.enums import AuditAction, DepositStatus
from app.repositories.deposit_repository import DepositRepository
from app.services.base_service import BaseService, transaction
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import ConflictError, NotFoundError, ValidationError
from app.validators import validate_amount, validate_reason
from calculator import format_money, quantize_money


class DepositService(BaseService):
    """Deposit intake and review."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize deposit service."""
        super().__init__(session)
        self.deposit_repo = DepositRepository(session)

    @transaction
    async def submit_deposit(
        self,
        user_id: str,
        amount: Decimal | str | int,
        txid: str | None,
        screenshot_url: str | None,
    ) -> Deposit:
        """
        Record a pending deposit claim.

        Args:
            user_id: Depositing user
            amount: Claimed amount (>= MIN_DEPOSIT_AMOUNT)
            txid: Transaction ID supplied by the user
            screenshot_url: Reference to the uploaded proof

        Returns:
            Created deposit in pending status

        Raises:
            ValidationError: On bad amount, missing txid or missing proof
            ForbiddenError: If the user is blocked
        """
        is_valid, value, error = validate_amount(amount)
        if not is_valid:
            raise ValidationError(error)
        if value < MIN_DEPOSIT_AMOUNT:
            raise ValidationError(f"Minimum deposit is {MIN_DEPOSIT_AMOUNT} USDT")
        if not txid or not txid.strip():
            raise ValidationError("Transaction ID is required")
        if not screenshot_url or not screenshot_url.strip():
            raise ValidationError("Screenshot proof is required")

        await self.get_user_or_raise(user_id, require_active=True)

        deposit = await self.deposit_repo.create(
            user_id=user_id,
            amount=quantize_money(value),
            txid=txid.strip(),
            screenshot_url=screenshot_url.strip(),
            status=DepositStatus.PENDING.value,
        )
        await self.audit.record(
            AuditAction.DEPOSIT_SUBMITTED,
            target_user_id=user_id,
            details={
                "deposit_id": deposit.id,
                "amount": format_money(deposit.amount),
                "txid": deposit.txid,
            },
        )

        self.logger.info(
            "Deposit submitted",
            extra={
                "user_id": user_id,
                "deposit_id": deposit.id,
                "amount": str(deposit.amount),
            },
        )
        return deposit

    @transaction
    async def reject_deposit(self, deposit_id: str, reason: str | None) -> Deposit:
        """
        Reject a pending deposit.

        Args:
            deposit_id: Deposit ID
            reason: Explanation shown to the user (min 10 characters)

        Returns:
            Rejected deposit

        Raises:
            ValidationError: If the reason is too short
            NotFoundError: If the deposit does not exist
            ConflictError: If the deposit was already reviewed
        """
        is_valid, error = validate_reason(reason)
        if not is_valid:
            raise ValidationError(error)

        deposit = await self.deposit_repo.get_by_id(deposit_id)
        if not deposit:
            raise NotFoundError("Deposit not found")

        transitioned = await self.deposit_repo.transition_status(
            deposit_id,
            DepositStatus.PENDING.value,
            DepositStatus.REJECTED.value,
            rejection_reason=reason.strip(),
            reviewed_at=utc_now(),
        )
        if not transitioned:
            raise ConflictError("Deposit has already been reviewed")

        await self.audit.record(
            AuditAction.DEPOSIT_REJECTED,
            target_user_id=deposit.user_id,
            details={
                "deposit_id": deposit_id,
                "amount": format_money(deposit.amount),
                "reason": reason.strip(),
            },
        )

        self.logger.info(
            "Deposit rejected",
            extra={"deposit_id": deposit_id, "user_id": deposit.user_id},
        )
        return await self.deposit_repo.get_by_id(deposit_id, fresh=True)

    async def get_user_deposits(self, user_id: str) -> list[Deposit]:
        """Get user's deposits, newest first."""
        return await self.deposit_repo.get_by_user(user_id)

    async def list_deposits(self, status: str | None = None) -> list[Deposit]:
        """Get all deposits with owners, newest first (admin)."""
        return await self.deposit_repo.find_all_with_user(status=status)
