"""
Withdrawal service.

Withdrawals debit the balance when requested. Rejection is a
compensating credit of the exact stored amount.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import MIN_WITHDRAWAL_AMOUNT
from app.models.enums import AuditAction, WithdrawalStatus
from app.models.withdrawal import Withdrawal
from app.repositories.user_repository import UserRepository
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.services.base_service import BaseService, transaction
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from app.validators import validate_amount, validate_usdt_address
from calculator import format_money, quantize_money


class WithdrawalService(BaseService):
    """Withdrawal intake and admin processing."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal service."""
        super().__init__(session)
        self.withdrawal_repo = WithdrawalRepository(session)
        self.user_repo = UserRepository(session)

    @transaction
    async def submit_withdrawal(
        self,
        user_id: str,
        amount: Decimal | str | int,
        usdt_address: str | None,
    ) -> Withdrawal:
        """
        Debit the balance and record a pending withdrawal.

        The conditional debit and the insert share one transaction: either
        both persist or neither does.

        Args:
            user_id: Requesting user
            amount: Amount to withdraw (>= MIN_WITHDRAWAL_AMOUNT)
            usdt_address: Payout address

        Returns:
            Created withdrawal in pending status

        Raises:
            ValidationError: On bad amount or address
            InsufficientFundsError: If amount exceeds the balance
            ForbiddenError: If the user is blocked
        """
        is_valid, value, error = validate_amount(amount)
        if not is_valid:
            raise ValidationError(error)
        if value < MIN_WITHDRAWAL_AMOUNT:
            raise ValidationError(
                f"Minimum withdrawal is {MIN_WITHDRAWAL_AMOUNT} USDT"
            )
        is_valid, error = validate_usdt_address(usdt_address)
        if not is_valid:
            raise ValidationError(error)

        user = await self.get_user_or_raise(user_id, require_active=True)
        value = quantize_money(value)
        balance_before = user.balance

        debited = await self.user_repo.debit_if_sufficient(user_id, value)
        if not debited:
            raise InsufficientFundsError("Insufficient balance")

        withdrawal = await self.withdrawal_repo.create(
            user_id=user_id,
            amount=value,
            usdt_address=usdt_address.strip(),
            status=WithdrawalStatus.PENDING.value,
        )
        await self.audit.record(
            AuditAction.WITHDRAWAL_REQUESTED,
            target_user_id=user_id,
            details={
                "withdrawal_id": withdrawal.id,
                "amount": format_money(value),
                "usdt_address": withdrawal.usdt_address,
            },
        )

        self.logger.info(
            "Withdrawal requested, balance debited",
            extra={
                "user_id": user_id,
                "withdrawal_id": withdrawal.id,
                "amount": str(value),
                "balance_before": str(balance_before),
            },
        )
        return withdrawal

    @transaction
    async def process_withdrawal(self, withdrawal_id: str) -> Withdrawal:
        """
        Mark a pending withdrawal as paid out.

        Args:
            withdrawal_id: Withdrawal ID

        Returns:
            Processed withdrawal

        Raises:
            NotFoundError: If the withdrawal does not exist
            ConflictError: If it is no longer pending
        """
        withdrawal = await self._get_or_raise(withdrawal_id)

        transitioned = await self.withdrawal_repo.transition_status(
            withdrawal_id,
            WithdrawalStatus.PENDING.value,
            WithdrawalStatus.PROCESSED.value,
            processed_at=utc_now(),
        )
        if not transitioned:
            raise ConflictError("Withdrawal is not pending")

        await self.audit.record(
            AuditAction.WITHDRAWAL_PROCESSED,
            target_user_id=withdrawal.user_id,
            details={
                "withdrawal_id": withdrawal_id,
                "amount": format_money(withdrawal.amount),
            },
        )

        self.logger.info(
            "Withdrawal processed",
            extra={
                "withdrawal_id": withdrawal_id,
                "user_id": withdrawal.user_id,
                "amount": str(withdrawal.amount),
            },
        )
        return await self.withdrawal_repo.get_by_id(withdrawal_id, fresh=True)

    @transaction
    async def reject_withdrawal(
        self, withdrawal_id: str, reason: str | None = None
    ) -> Withdrawal:
        """
        Reject a pending withdrawal and return the funds.

        The re-credit uses the amount stored on the withdrawal, never a
        recomputed value.

        Args:
            withdrawal_id: Withdrawal ID
            reason: Optional explanation

        Returns:
            Rejected withdrawal

        Raises:
            NotFoundError: If the withdrawal does not exist
            ConflictError: If it is no longer pending
        """
        withdrawal = await self._get_or_raise(withdrawal_id)
        reason = reason.strip() if reason else None

        transitioned = await self.withdrawal_repo.transition_status(
            withdrawal_id,
            WithdrawalStatus.PENDING.value,
            WithdrawalStatus.REJECTED.value,
            rejection_reason=reason,
            processed_at=utc_now(),
        )
        if not transitioned:
            raise ConflictError("Withdrawal is not pending")

        credited = await self.user_repo.adjust_balance(
            withdrawal.user_id, withdrawal.amount
        )
        if not credited:
            raise NotFoundError("User not found")

        await self.audit.record(
            AuditAction.WITHDRAWAL_REJECTED,
            target_user_id=withdrawal.user_id,
            details={
                "withdrawal_id": withdrawal_id,
                "amount": format_money(withdrawal.amount),
                "reason": reason,
            },
        )

        self.logger.info(
            "Withdrawal rejected, balance restored",
            extra={
                "withdrawal_id": withdrawal_id,
                "user_id": withdrawal.user_id,
                "amount": str(withdrawal.amount),
            },
        )
        return await self.withdrawal_repo.get_by_id(withdrawal_id, fresh=True)

    async def get_user_withdrawals(self, user_id: str) -> list[Withdrawal]:
        """Get user's withdrawals, newest first."""
        return await self.withdrawal_repo.get_by_user(user_id)

    async def list_withdrawals(
        self, status: str | None = None
    ) -> list[Withdrawal]:
        """Get all withdrawals with owners, newest first (admin)."""
        return await self.withdrawal_repo.find_all_with_user(status=status)

    async def _get_or_raise(self, withdrawal_id: str) -> Withdrawal:
        withdrawal = await self.withdrawal_repo.get_by_id(withdrawal_id)
        if not withdrawal:
            raise NotFoundError("Withdrawal not found")
        return withdrawal
