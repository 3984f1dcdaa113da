"""
Investment model.

A fixed-term position opened from exactly one approved deposit.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, generate_uuid
from app.models.enums import InvestmentStatus
from app.models.types import MoneyType, PercentType, UTCDateTime

if TYPE_CHECKING:
    from app.models.deposit import Deposit
    from app.models.user import User


class Investment(Base):
    """Investment model - time-boxed yield position."""

    __tablename__ = "investments"
    __table_args__ = (
        CheckConstraint(
            'amount > 0', name='check_investment_amount_positive'
        ),
        CheckConstraint(
            'profit_rate >= 0', name='check_investment_rate_non_negative'
        ),
        CheckConstraint(
            "status IN ('active', 'completed')",
            name='check_investment_status'
        ),
        # profit_paid <=> completed
        CheckConstraint(
            "(profit_paid AND status = 'completed') OR "
            "(NOT profit_paid AND status = 'active')",
            name='check_investment_paid_matches_status'
        ),
        Index(
            'idx_investment_maturity',
            'status', 'profit_paid', 'matures_at'
        ),
    )

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )

    # References
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    # One investment per deposit
    deposit_id: Mapped[str] = mapped_column(
        ForeignKey("deposits.id"), unique=True, nullable=False
    )

    # Terms, immutable after creation
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    profit_rate: Mapped[Decimal] = mapped_column(
        PercentType, nullable=False
    )
    started_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    matures_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False
    )

    # Settlement
    profit_paid: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=InvestmentStatus.ACTIVE.value,
        nullable=False,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="raise")
    deposit: Mapped["Deposit"] = relationship("Deposit", lazy="raise")

    @property
    def is_settled(self) -> bool:
        """Check if the investment has been paid out."""
        return self.profit_paid

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Investment(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, rate={self.profit_rate}, "
            f"status={self.status})>"
        )
