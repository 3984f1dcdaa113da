"""
Integration tests for deposit approval and investment creation.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from app.models.enums import (
    AuditAction,
    DepositStatus,
    InvestmentStatus,
    LifecyclePolicy,
    ReferralRewardMode,
)
from app.repositories.investment_repository import InvestmentRepository
from app.services.investment import InvestmentLifecycleManager
from app.utils.exceptions import (
    AlreadyInvestedError,
    ConflictError,
    ForbiddenError,
    InsufficientFundsError,
    NotApprovedError,
    NotFoundError,
)


def auto_manager(session) -> InvestmentLifecycleManager:
    return InvestmentLifecycleManager(
        session, LifecyclePolicy.AUTO_INVEST, ReferralRewardMode.QUALIFICATION
    )


def manual_manager(session) -> InvestmentLifecycleManager:
    return InvestmentLifecycleManager(
        session, LifecyclePolicy.MANUAL_INVEST, ReferralRewardMode.QUALIFICATION
    )


class TestAutoInvestPolicy:
    """Approval opens the investment immediately."""

    @pytest.mark.asyncio
    async def test_approval_opens_investment(
        self, session, create_user, create_deposit, reload_user, audit_actions
    ) -> None:
        user = await create_user()
        deposit = await create_deposit(user, "100")

        result = await auto_manager(session).approve_deposit(deposit.id)

        assert result.deposit.status == DepositStatus.APPROVED.value
        assert result.deposit.reviewed_at is not None
        investment = result.investment
        assert investment is not None
        assert investment.deposit_id == deposit.id
        assert investment.amount == Decimal("100")
        assert investment.profit_rate == Decimal("10")
        assert investment.status == InvestmentStatus.ACTIVE.value
        assert investment.matures_at - investment.started_at == timedelta(hours=72)
        assert result.qualification is None

        # Balance untouched under auto policy
        assert (await reload_user(user.id)).balance == Decimal("0")

        actions = await audit_actions(user.id)
        assert AuditAction.INVESTMENT_STARTED.value in actions
        assert AuditAction.DEPOSIT_APPROVED.value in actions

    @pytest.mark.asyncio
    async def test_rate_follows_user_yield(self, session, create_user, create_deposit) -> None:
        user = await create_user(total_yield_percent=17)
        deposit = await create_deposit(user, "40")

        result = await auto_manager(session).approve_deposit(deposit.id)
        assert result.investment.profit_rate == Decimal("17")

    @pytest.mark.asyncio
    async def test_reapproval_conflicts(
        self, session, session_maker, create_user, create_deposit
    ) -> None:
        """A deposit yields exactly one investment."""
        user = await create_user()
        deposit = await create_deposit(user)
        await auto_manager(session).approve_deposit(deposit.id)

        with pytest.raises(ConflictError):
            await auto_manager(session).approve_deposit(deposit.id)

        async with session_maker() as s:
            investments = await InvestmentRepository(s).get_by_user(user.id)
        assert len(investments) == 1

    @pytest.mark.asyncio
    async def test_rejected_deposit_cannot_be_approved(
        self, session, create_user, create_deposit
    ) -> None:
        user = await create_user()
        deposit = await create_deposit(user, status=DepositStatus.REJECTED.value)
        with pytest.raises(ConflictError):
            await auto_manager(session).approve_deposit(deposit.id)

    @pytest.mark.asyncio
    async def test_unknown_deposit(self, session) -> None:
        with pytest.raises(NotFoundError):
            await auto_manager(session).approve_deposit("missing")

    @pytest.mark.asyncio
    async def test_start_refused(self, session, create_user, create_deposit) -> None:
        user = await create_user()
        deposit = await create_deposit(user, status=DepositStatus.APPROVED.value)
        with pytest.raises(ConflictError):
            await auto_manager(session).start_investment(user.id, deposit.id)


class TestManualInvestPolicy:
    """Approval credits the balance, the user starts the investment."""

    @pytest.mark.asyncio
    async def test_approve_then_start(
        self, session, create_user, create_deposit, reload_user
    ) -> None:
        user = await create_user()
        deposit = await create_deposit(user, "80")
        manager = manual_manager(session)

        result = await manager.approve_deposit(deposit.id)
        assert result.investment is None
        assert (await reload_user(user.id)).balance == Decimal("80")

        available = await manager.get_available_deposits(user.id)
        assert [d.id for d in available] == [deposit.id]

        investment = await manager.start_investment(user.id, deposit.id)
        assert investment.amount == Decimal("80")
        assert (await reload_user(user.id)).balance == Decimal("0")
        assert await manager.get_available_deposits(user.id) == []

    @pytest.mark.asyncio
    async def test_second_start_rejected(self, session, create_user, create_deposit) -> None:
        user = await create_user()
        deposit = await create_deposit(user, "80")
        manager = manual_manager(session)
        await manager.approve_deposit(deposit.id)
        await manager.start_investment(user.id, deposit.id)

        with pytest.raises(AlreadyInvestedError):
            await manager.start_investment(user.id, deposit.id)

    @pytest.mark.asyncio
    async def test_pending_deposit_not_approved(
        self, session, create_user, create_deposit
    ) -> None:
        user = await create_user()
        deposit = await create_deposit(user)
        with pytest.raises(NotApprovedError):
            await manual_manager(session).start_investment(user.id, deposit.id)

    @pytest.mark.asyncio
    async def test_foreign_deposit_forbidden(
        self, session, create_user, create_deposit
    ) -> None:
        owner = await create_user()
        other = await create_user()
        deposit = await create_deposit(owner, status=DepositStatus.APPROVED.value)
        with pytest.raises(ForbiddenError):
            await manual_manager(session).start_investment(other.id, deposit.id)

    @pytest.mark.asyncio
    async def test_withdrawn_credit_cannot_be_invested(
        self, session, create_user, create_deposit, reload_user
    ) -> None:
        """Start fails when the credited funds are gone."""
        user = await create_user(balance=Decimal("10"))
        deposit = await create_deposit(
            user, "80", status=DepositStatus.APPROVED.value
        )

        with pytest.raises(InsufficientFundsError):
            await manual_manager(session).start_investment(user.id, deposit.id)
        assert (await reload_user(user.id)).balance == Decimal("10")


class TestProfitShareSnapshot:
    """Profit-share investments open at the investor's own tier."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("own_referrals", "expected_rate"),
        [(0, "10"), (1, "11"), (2, "12"), (3, "13"), (5, "13")],
    )
    async def test_rate_follows_investor_referrals(
        self, session, create_user, create_deposit, own_referrals, expected_rate
    ) -> None:
        referrer = await create_user()
        investor = await create_user(referred_by=referrer.id)
        for _ in range(own_referrals):
            await create_user(referred_by=investor.id)
        deposit = await create_deposit(investor, "100")

        manager = InvestmentLifecycleManager(
            session, LifecyclePolicy.AUTO_INVEST, ReferralRewardMode.PROFIT_SHARE
        )
        result = await manager.approve_deposit(deposit.id)

        assert result.investment.profit_rate == Decimal(expected_rate)
        assert result.qualification is None
