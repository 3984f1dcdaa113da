"""
Integration tests for user accounts and admin statistics.
"""

import json
from decimal import Decimal

import pytest

from app.models import Withdrawal
from app.models.enums import AuditAction, ReferralRewardMode, WithdrawalStatus
from app.repositories.audit_log_repository import AuditLogRepository
from app.services.investment import MaturitySweep
from app.services.stats_service import StatsService
from app.services.user_service import UserService, generate_referral_code
from app.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


def user_service(session) -> UserService:
    return UserService(session, bcrypt_rounds=4)


class TestRegistration:
    """Tests for UserService.register."""

    @pytest.mark.asyncio
    async def test_register(self, session) -> None:
        user = await user_service(session).register(
            " Alice Example ", " Alice@Example.com ", "password123"
        )

        assert user.full_name == "Alice Example"
        assert user.email == "alice@example.com"
        assert user.referral_code.startswith("YLD")
        assert user.balance == Decimal("0")
        assert user.total_yield_percent == 10
        assert user.referred_by is None
        assert user.verify_password("password123")

    @pytest.mark.asyncio
    async def test_register_with_referral_code(self, session, create_user) -> None:
        referrer = await create_user()

        user = await user_service(session).register(
            "Bob", "bob@example.com", "password123",
            referral_code=referrer.referral_code.lower(),
        )

        assert user.referred_by == referrer.id

    @pytest.mark.asyncio
    async def test_unknown_referral_code(self, session) -> None:
        with pytest.raises(ValidationError, match="Invalid referral code"):
            await user_service(session).register(
                "Bob", "bob@example.com", "password123", referral_code="NOPE"
            )

    @pytest.mark.asyncio
    async def test_duplicate_email(self, session, create_user) -> None:
        await create_user(email="taken@example.com")
        with pytest.raises(ConflictError, match="Email already registered"):
            await user_service(session).register(
                "Bob", "TAKEN@example.com", "password123"
            )

    @pytest.mark.asyncio
    async def test_one_account_per_device(self, session) -> None:
        service = user_service(session)
        await service.register("Ann", "ann@example.com", "password123", device_id="dev-1")

        with pytest.raises(ConflictError, match="device"):
            await service.register(
                "Ben", "ben@example.com", "password123", device_id="dev-1"
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "full_name, email, password",
        [
            ("A", "a@example.com", "password123"),
            ("Alice", "not-an-email", "password123"),
            ("Alice", "a@example.com", "short"),
        ],
    )
    async def test_invalid_input(self, session, full_name, email, password) -> None:
        with pytest.raises(ValidationError):
            await user_service(session).register(full_name, email, password)

    def test_generated_code_format(self) -> None:
        code = generate_referral_code()
        assert code.startswith("YLD")
        assert len(code) == 8
        assert code == code.upper()


class TestAuthentication:
    """Tests for UserService.authenticate."""

    @pytest.mark.asyncio
    async def test_login(self, session, create_user) -> None:
        user = await create_user(email="login@example.com")
        authenticated = await user_service(session).authenticate(
            "LOGIN@example.com", "password123"
        )
        assert authenticated.id == user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email, password",
        [
            ("login@example.com", "wrong-password"),
            ("nobody@example.com", "password123"),
            (None, None),
        ],
    )
    async def test_bad_credentials(self, session, create_user, email, password) -> None:
        await create_user(email="login@example.com")
        with pytest.raises(UnauthorizedError):
            await user_service(session).authenticate(email, password)

    @pytest.mark.asyncio
    async def test_blocked_user(self, session, create_user) -> None:
        await create_user(email="blocked@example.com", is_blocked=True)
        with pytest.raises(ForbiddenError):
            await user_service(session).authenticate("blocked@example.com", "password123")


class TestAdminAccountManagement:
    """Tests for balance override and blocking."""

    @pytest.mark.asyncio
    async def test_set_balance_audited(self, session, create_user) -> None:
        user = await create_user(balance=Decimal("12.5"))

        updated = await user_service(session).set_balance(
            user.id, "100", "Manual correction"
        )

        assert updated.balance == Decimal("100")
        entries = await AuditLogRepository(session).get_by_action(
            AuditAction.BALANCE_ADJUSTED.value, user.id
        )
        assert len(entries) == 1
        details = json.loads(entries[0].details)
        assert details["previous_balance"] == "12.500000"
        assert details["new_balance"] == "100.000000"
        assert details["reason"] == "Manual correction"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("balance, reason", [("-1", "fix"), ("10", ""), ("10", None)])
    async def test_set_balance_invalid(self, session, create_user, balance, reason) -> None:
        user = await create_user()
        with pytest.raises(ValidationError):
            await user_service(session).set_balance(user.id, balance, reason)

    @pytest.mark.asyncio
    async def test_set_balance_unknown_user(self, session) -> None:
        with pytest.raises(NotFoundError):
            await user_service(session).set_balance("missing", "10", "fix")

    @pytest.mark.asyncio
    async def test_block_and_unblock(self, session, create_user, reload_user, audit_actions) -> None:
        user = await create_user()
        service = user_service(session)

        assert (await service.set_blocked(user.id, True)).is_blocked is True
        assert (await service.set_blocked(user.id, False)).is_blocked is False
        assert (await reload_user(user.id)).is_blocked is False
        assert set(await audit_actions(user.id)) == {
            AuditAction.USER_BLOCKED.value,
            AuditAction.USER_UNBLOCKED.value,
        }

    @pytest.mark.asyncio
    async def test_block_unknown_user(self, session) -> None:
        with pytest.raises(NotFoundError):
            await user_service(session).set_blocked("missing", True)

    @pytest.mark.asyncio
    async def test_profile_and_detail(self, session, create_user, create_deposit) -> None:
        referrer = await create_user()
        await create_user(referred_by=referrer.id)
        await create_deposit(referrer, "15")

        profile = await user_service(session).get_profile(referrer.id)
        assert profile["referral_count"] == 1

        detail = await user_service(session).get_user_detail(referrer.id)
        assert len(detail["deposits"]) == 1
        assert len(detail["referrals"]) == 1
        assert detail["investments"] == []
        assert detail["withdrawals"] == []

        listing = await user_service(session).list_users()
        counts = {row["user"].id: row["referral_count"] for row in listing}
        assert counts[referrer.id] == 1


class TestPlatformStats:
    """Tests for StatsService.get_platform_stats."""

    @pytest.mark.asyncio
    async def test_empty_platform(self, session) -> None:
        stats = await StatsService(session).get_platform_stats()
        assert stats["total_users"] == 0
        assert stats["total_deposits"] == Decimal("0")
        assert stats["today_profit"] == Decimal("0")

    @pytest.mark.asyncio
    async def test_aggregates(
        self,
        session,
        session_maker,
        create_user,
        create_deposit,
        create_investment,
    ) -> None:
        user = await create_user()
        await create_deposit(user, "10")
        await create_investment(user, "100", "10")
        await create_investment(user, "40", "10", matured=False)
        async with session_maker() as s:
            s.add(Withdrawal(
                user_id=user.id,
                amount=Decimal("25"),
                usdt_address="TLfixnZVqzmTp2UhQwHjPiiV9eK3NemLy7",
                status=WithdrawalStatus.PROCESSED.value,
            ))
            await s.commit()
        await MaturitySweep(session_maker).run()

        stats = await StatsService(session).get_platform_stats()

        assert stats["total_users"] == 1
        assert stats["total_deposits"] == Decimal("140")
        assert stats["pending_deposits"] == 1
        assert stats["total_withdrawals"] == Decimal("25")
        assert stats["pending_withdrawals"] == 0
        assert stats["active_investments"] == 1
        assert stats["active_investment_volume"] == Decimal("40")
        assert stats["today_profit"] == Decimal("10")
        assert stats["total_referral_earnings"] == Decimal("0")

    @pytest.mark.asyncio
    async def test_profit_share_counts_base_rate_profit(
        self, session, session_maker, create_user, create_investment
    ) -> None:
        referrer = await create_user()
        investor = await create_user(referred_by=referrer.id)
        await create_investment(investor, "100", "12")
        await MaturitySweep(session_maker, ReferralRewardMode.PROFIT_SHARE).run()

        stats = await StatsService(
            session, ReferralRewardMode.PROFIT_SHARE
        ).get_platform_stats()

        assert stats["today_profit"] == Decimal("10")
        assert stats["total_referral_earnings"] == Decimal("2")
