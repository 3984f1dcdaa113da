"""
Deposit model.

Represents a user-submitted deposit claim awaiting admin review.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, generate_uuid
from app.models.enums import DepositStatus
from app.models.types import MoneyType, UTCDateTime

if TYPE_CHECKING:
    from app.models.user import User


class Deposit(Base):
    """Deposit model - off-chain verified stablecoin deposits."""

    __tablename__ = "deposits"
    __table_args__ = (
        CheckConstraint(
            'amount > 0', name='check_deposit_amount_positive'
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='check_deposit_status'
        ),
        Index('idx_deposit_user_status', 'user_id', 'status'),
    )

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )

    # Owner
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )

    # Claim
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    txid: Mapped[str] = mapped_column(String(255), nullable=False)
    screenshot_url: Mapped[str] = mapped_column(Text, nullable=False)

    # Review
    status: Mapped[str] = mapped_column(
        String(20),
        default=DepositStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="raise")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Deposit(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
