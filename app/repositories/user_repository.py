"""
User repository.

Data access layer for User model. Balance and counter changes are issued
as SQL arithmetic so concurrent settlements and withdrawals on the same
user never lose an update.
"""

from decimal import Decimal

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import MAX_YIELD_PERCENT
from app.models.deposit import Deposit
from app.models.enums import DepositStatus
from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with ledger primitives."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email (stored lowercase).

        Args:
            email: Email address

        Returns:
            User or None
        """
        return await self.get_by(email=email.strip().lower())

    async def get_by_referral_code(
        self, referral_code: str
    ) -> User | None:
        """
        Get user by referral code.

        Args:
            referral_code: Referral code

        Returns:
            User or None
        """
        return await self.get_by(referral_code=referral_code.strip().upper())

    async def get_by_device_id(self, device_id: str) -> User | None:
        """Get user registered from a device."""
        return await self.get_by(device_id=device_id)

    async def adjust_balance(self, user_id: str, delta: Decimal) -> bool:
        """
        Atomically add a signed delta to the balance.

        Args:
            user_id: User ID
            delta: Amount to add (negative to subtract)

        Returns:
            True if the user exists and was updated
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(balance=User.balance + delta)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def debit_if_sufficient(
        self, user_id: str, amount: Decimal
    ) -> bool:
        """
        Atomically subtract amount only if the balance covers it.

        Args:
            user_id: User ID
            amount: Positive amount to debit

        Returns:
            True if debited, False if balance was insufficient
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.balance >= amount)
            .values(balance=User.balance - amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def set_balance(self, user_id: str, balance: Decimal) -> bool:
        """
        Replace balance with an absolute value (admin override).

        Args:
            user_id: User ID
            balance: New balance

        Returns:
            True if the user exists
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(balance=balance)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def set_blocked(self, user_id: str, blocked: bool) -> bool:
        """Set the blocked flag."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(is_blocked=blocked)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def increment_qualified_referrals(self, user_id: str) -> bool:
        """
        Count one more qualified referral and raise yield by one point.

        Yield is capped at MAX_YIELD_PERCENT in the same statement.

        Args:
            user_id: Referrer ID

        Returns:
            True if the referrer exists
        """
        bumped = User.total_yield_percent + 1
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                qualified_referrals=User.qualified_referrals + 1,
                total_yield_percent=case(
                    (bumped > MAX_YIELD_PERCENT, MAX_YIELD_PERCENT),
                    else_=bumped,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def raise_yield_to(self, user_id: str, percent: int) -> bool:
        """
        Raise yield to at least percent, never lowering it.

        Args:
            user_id: User ID
            percent: Floor for the yield rate (capped at the maximum)

        Returns:
            True if the user exists
        """
        target = min(MAX_YIELD_PERCENT, percent)
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                total_yield_percent=case(
                    (User.total_yield_percent < target, target),
                    else_=User.total_yield_percent,
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def claim_flag(self, user_id: str, flag: str) -> bool:
        """
        Flip a one-shot boolean flag from False to True.

        Args:
            user_id: User ID
            flag: Column name (welcome_bonus_paid, referral_bonus_paid)

        Returns:
            True only for the call that flipped it
        """
        column = getattr(User, flag)
        stmt = (
            update(User)
            .where(User.id == user_id, column.is_(False))
            .values({flag: True})
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def count_referrals(self, user_id: str) -> int:
        """Count users referred directly by user_id."""
        return await self.count(referred_by=user_id)

    async def get_referrals(self, user_id: str) -> list[User]:
        """Get users referred directly by user_id, newest first."""
        return await self.find_all(referred_by=user_id)

    async def get_referral_counts(self) -> dict[str, int]:
        """
        Get direct referral counts for every referrer.

        Returns:
            Mapping of referrer ID to referral count
        """
        stmt = (
            select(User.referred_by, func.count(User.id))
            .where(User.referred_by.is_not(None))
            .group_by(User.referred_by)
        )
        result = await self.session.execute(stmt)
        return {row[0]: row[1] for row in result.all()}

    async def get_deposit_totals_for_referrals(
        self, user_id: str
    ) -> dict[str, Decimal]:
        """
        Sum approved deposits of every user referred by user_id.

        Args:
            user_id: Referrer ID

        Returns:
            Mapping of referred user ID to approved deposit total
        """
        stmt = (
            select(Deposit.user_id, func.sum(Deposit.amount))
            .join(User, User.id == Deposit.user_id)
            .where(
                User.referred_by == user_id,
                Deposit.status == DepositStatus.APPROVED.value,
            )
            .group_by(Deposit.user_id)
        )
        result = await self.session.execute(stmt)
        return {
            row[0]: Decimal(row[1] or 0)
            for row in result.all()
        }
