"""
User service.

Registration, login, profile and admin account management.
"""

import secrets
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    REFERRAL_CODE_ALPHABET,
    REFERRAL_CODE_LENGTH,
    REFERRAL_CODE_MAX_ATTEMPTS,
    REFERRAL_CODE_PREFIX,
)
from app.config.settings import settings
from app.models.enums import AuditAction
from app.models.user import User
from app.repositories.deposit_repository import DepositRepository
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.user_repository import UserRepository
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.services.base_service import BaseService, transaction
from app.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from app.validators import (
    normalize_email,
    validate_amount,
    validate_email,
    validate_full_name,
    validate_password,
    validate_reason,
)
from calculator import format_money, quantize_money


def generate_referral_code() -> str:
    """
    Generate a random referral code.

    Returns:
        Code like YLD7K2QA
    """
    suffix = "".join(
        secrets.choice(REFERRAL_CODE_ALPHABET)
        for _ in range(REFERRAL_CODE_LENGTH)
    )
    return f"{REFERRAL_CODE_PREFIX}{suffix}"


class UserService(BaseService):
    """User account operations."""

    def __init__(self, session: AsyncSession, bcrypt_rounds: int | None = None) -> None:
        """
        Initialize user service.

        Args:
            session: Async database session
            bcrypt_rounds: Password hashing cost, defaults to settings
        """
        super().__init__(session)
        self.bcrypt_rounds = bcrypt_rounds or settings.bcrypt_rounds
        self.user_repo = UserRepository(session)

    @transaction
    async def register(
        self,
        full_name: str | None,
        email: str | None,
        password: str | None,
        referral_code: str | None = None,
        device_id: str | None = None,
    ) -> User:
        """
        Register a new user.

        Args:
            full_name: Display name
            email: Login email (stored lowercase)
            password: Plain text password
            referral_code: Code of the referring user, optional
            device_id: Client device identifier, optional

        Returns:
            Created user

        Raises:
            ValidationError: On invalid input or unknown referral code
            ConflictError: If the email or device is already registered
        """
        for is_valid, error in (
            validate_full_name(full_name),
            validate_email(email),
            validate_password(password),
        ):
            if not is_valid:
                raise ValidationError(error)

        email = normalize_email(email)
        if await self.user_repo.get_by_email(email):
            raise ConflictError("Email already registered")

        device_id = device_id.strip() if device_id and device_id.strip() else None
        if device_id and await self.user_repo.get_by_device_id(device_id):
            raise ConflictError("This device already has an account")

        referrer = None
        if referral_code and referral_code.strip():
            referrer = await self.user_repo.get_by_referral_code(referral_code)
            if referrer is None:
                raise ValidationError("Invalid referral code")

        user = User(
            full_name=full_name.strip(),
            email=email,
            referral_code=await self._unique_referral_code(),
            referred_by=referrer.id if referrer else None,
            device_id=device_id,
        )
        user.set_password(password, rounds=self.bcrypt_rounds)
        self.session.add(user)

        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError("Email already registered") from e

        self.logger.info(
            "User registered",
            extra={
                "user_id": user.id,
                "referred_by": user.referred_by,
            },
        )
        return user

    async def authenticate(self, email: str | None, password: str | None) -> User:
        """
        Check login credentials.

        Args:
            email: Login email
            password: Plain text password

        Returns:
            Authenticated user

        Raises:
            UnauthorizedError: On unknown email or wrong password
            ForbiddenError: If the account is blocked
        """
        if not email or not password:
            raise UnauthorizedError("Invalid email or password")

        user = await self.user_repo.get_by_email(email)
        if user is None or not user.verify_password(password):
            raise UnauthorizedError("Invalid email or password")
        if user.is_blocked:
            raise ForbiddenError("Account is blocked")
        return user

    async def get_profile(self, user_id: str) -> dict[str, Any]:
        """
        Get user with referral counters.

        Args:
            user_id: User ID

        Returns:
            Dict with the user and their direct referral count
        """
        user = await self.get_user_or_raise(user_id, fresh=True)
        referral_count = await self.user_repo.count_referrals(user_id)
        return {"user": user, "referral_count": referral_count}

    async def list_users(self) -> list[dict[str, Any]]:
        """
        Get all users with referral counts, newest first (admin).

        Returns:
            List of dicts with user and referral_count
        """
        users = await self.user_repo.find_all()
        counts = await self.user_repo.get_referral_counts()
        return [
            {"user": user, "referral_count": counts.get(user.id, 0)}
            for user in users
        ]

    async def get_user_detail(self, user_id: str) -> dict[str, Any]:
        """
        Get everything about a user (admin).

        Args:
            user_id: User ID

        Returns:
            Dict with user, deposits, investments, withdrawals, referrals
        """
        user = await self.get_user_or_raise(user_id, fresh=True)
        return {
            "user": user,
            "deposits": await DepositRepository(self.session).get_by_user(user_id),
            "investments": await InvestmentRepository(self.session).get_by_user(user_id),
            "withdrawals": await WithdrawalRepository(self.session).get_by_user(user_id),
            "referrals": await self.user_repo.get_referrals(user_id),
        }

    @transaction
    async def set_balance(
        self,
        user_id: str,
        balance: Decimal | str | int,
        reason: str | None,
    ) -> User:
        """
        Replace a user's balance (admin override).

        Args:
            user_id: User ID
            balance: New absolute balance
            reason: Why the balance is overridden

        Returns:
            Updated user

        Raises:
            ValidationError: On negative balance or missing reason
            NotFoundError: If the user does not exist
        """
        is_valid, value, error = validate_amount(balance)
        if not is_valid:
            raise ValidationError(error)
        is_valid, error = validate_reason(reason, min_length=1)
        if not is_valid:
            raise ValidationError("Reason is required")

        user = await self.get_user_or_raise(user_id, fresh=True)
        previous = user.balance
        value = quantize_money(value)

        await self.user_repo.set_balance(user_id, value)
        await self.audit.record(
            AuditAction.BALANCE_ADJUSTED,
            target_user_id=user_id,
            details={
                "previous_balance": format_money(previous),
                "new_balance": format_money(value),
                "reason": reason.strip(),
            },
        )

        self.logger.warning(
            "Balance overridden by admin",
            extra={
                "user_id": user_id,
                "balance_before": str(previous),
                "balance_after": str(value),
            },
        )
        return await self.user_repo.get_by_id(user_id, fresh=True)

    @transaction
    async def set_blocked(self, user_id: str, blocked: bool) -> User:
        """
        Block or unblock a user.

        Args:
            user_id: User ID
            blocked: New blocked state

        Returns:
            Updated user
        """
        if not await self.user_repo.set_blocked(user_id, blocked):
            raise NotFoundError("User not found")

        await self.audit.record(
            AuditAction.USER_BLOCKED if blocked else AuditAction.USER_UNBLOCKED,
            target_user_id=user_id,
        )
        self.logger.info(
            "User blocked" if blocked else "User unblocked",
            extra={"user_id": user_id},
        )
        return await self.user_repo.get_by_id(user_id, fresh=True)

    async def _unique_referral_code(self) -> str:
        for _ in range(REFERRAL_CODE_MAX_ATTEMPTS):
            code = generate_referral_code()
            if not await self.user_repo.get_by_referral_code(code):
                return code
        raise ServerError("Could not generate a unique referral code")
