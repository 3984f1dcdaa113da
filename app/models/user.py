"""
User model.

Represents a registered platform user and their ledger balance.
"""

from datetime import UTC, datetime
from decimal import Decimal

import bcrypt
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, generate_uuid
from app.models.types import MoneyType, UTCDateTime


class User(Base):
    """User model - registered platform users."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_user_balance_non_negative'
        ),
        CheckConstraint(
            'total_yield_percent >= 10 AND total_yield_percent <= 30',
            name='check_user_yield_range'
        ),
        CheckConstraint(
            'qualified_referrals >= 0',
            name='check_user_qualified_referrals_non_negative'
        ),
    )

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )

    # Identity
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    email_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    device_id: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True
    )

    # Referral
    referral_code: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )
    # Weak reference: no foreign key, a dangling id is tolerated
    referred_by: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True
    )
    qualified_referrals: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    total_yield_percent: Mapped[int] = mapped_column(
        Integer, default=10, nullable=False
    )
    welcome_bonus_paid: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    referral_bonus_paid: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    # Ledger
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Status
    is_blocked: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def set_password(self, password: str, rounds: int = 12) -> None:
        """
        Set login password with bcrypt hashing.

        Args:
            password: Plain text password to hash and store
            rounds: bcrypt cost factor
        """
        self.password_hash = bcrypt.hashpw(
            password.encode(), bcrypt.gensalt(rounds=rounds)
        ).decode()

    def verify_password(self, password: str) -> bool:
        """
        Verify login password against stored hash.

        Args:
            password: Plain text password to verify

        Returns:
            True if password matches
        """
        if not self.password_hash:
            return False
        return bcrypt.checkpw(
            password.encode(), self.password_hash.encode()
        )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, email={self.email}, "
            f"balance={self.balance})>"
        )
