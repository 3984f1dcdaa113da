"""
Integration tests for deposit intake and review.
"""

from decimal import Decimal

import pytest

from app.models.enums import AuditAction, DepositStatus
from app.services.deposit_service import DepositService
from app.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)


class TestSubmitDeposit:
    """Tests for DepositService.submit_deposit."""

    @pytest.mark.asyncio
    async def test_creates_pending_deposit(self, session, create_user, audit_actions) -> None:
        user = await create_user()

        deposit = await DepositService(session).submit_deposit(
            user.id, "25.5", " tx-abc ", "https://img.example.com/1.png"
        )

        assert deposit.status == DepositStatus.PENDING.value
        assert deposit.amount == Decimal("25.5")
        assert deposit.txid == "tx-abc"
        assert await audit_actions(user.id) == [AuditAction.DEPOSIT_SUBMITTED.value]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "amount, txid, screenshot, message",
        [
            ("4.99", "tx", "https://x/1.png", "Minimum deposit is 5 USDT"),
            ("abc", "tx", "https://x/1.png", "Invalid amount format"),
            ("10", "", "https://x/1.png", "Transaction ID is required"),
            ("10", "tx", None, "Screenshot proof is required"),
        ],
    )
    async def test_rejects_invalid_input(
        self, session, create_user, amount, txid, screenshot, message
    ) -> None:
        user = await create_user()

        with pytest.raises(ValidationError) as exc_info:
            await DepositService(session).submit_deposit(
                user.id, amount, txid, screenshot
            )
        assert exc_info.value.message == message

    @pytest.mark.asyncio
    async def test_minimum_is_inclusive(self, session, create_user) -> None:
        user = await create_user()
        deposit = await DepositService(session).submit_deposit(
            user.id, "5", "tx", "https://x/1.png"
        )
        assert deposit.amount == Decimal("5")

    @pytest.mark.asyncio
    async def test_blocked_user_cannot_deposit(self, session, create_user) -> None:
        user = await create_user(is_blocked=True)
        with pytest.raises(ForbiddenError):
            await DepositService(session).submit_deposit(
                user.id, "10", "tx", "https://x/1.png"
            )


class TestRejectDeposit:
    """Tests for DepositService.reject_deposit."""

    @pytest.mark.asyncio
    async def test_reject_pending(self, session, create_user, create_deposit) -> None:
        user = await create_user()
        deposit = await create_deposit(user)

        rejected = await DepositService(session).reject_deposit(
            deposit.id, "Transaction not found on chain"
        )

        assert rejected.status == DepositStatus.REJECTED.value
        assert rejected.rejection_reason == "Transaction not found on chain"
        assert rejected.reviewed_at is not None

    @pytest.mark.asyncio
    async def test_reason_too_short(self, session, create_user, create_deposit) -> None:
        user = await create_user()
        deposit = await create_deposit(user)
        with pytest.raises(ValidationError):
            await DepositService(session).reject_deposit(deposit.id, "no")

    @pytest.mark.asyncio
    async def test_already_reviewed(self, session, create_user, create_deposit) -> None:
        user = await create_user()
        deposit = await create_deposit(user, status=DepositStatus.APPROVED.value)
        with pytest.raises(ConflictError):
            await DepositService(session).reject_deposit(
                deposit.id, "Transaction not found on chain"
            )

    @pytest.mark.asyncio
    async def test_unknown_deposit(self, session) -> None:
        with pytest.raises(NotFoundError):
            await DepositService(session).reject_deposit(
                "missing", "Transaction not found on chain"
            )
