"""
Referral commission model.

Append-only record of a referral qualification event or a profit-share
payout.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, generate_uuid
from app.models.types import MoneyType, UTCDateTime


class ReferralCommission(Base):
    """Referral commission record."""

    __tablename__ = "referral_commissions"
    __table_args__ = (
        CheckConstraint(
            'amount >= 0', name='check_commission_amount_non_negative'
        ),
        CheckConstraint(
            "kind IN ('qualification', 'profit_share')",
            name='check_commission_kind'
        ),
        Index(
            'idx_commission_referrer_from_kind',
            'referrer_id', 'from_user_id', 'kind'
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    referrer_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    from_user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False
    )
    # Set for profit-share payouts, empty for qualification markers
    investment_id: Mapped[str | None] = mapped_column(
        ForeignKey("investments.id"), nullable=True
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralCommission(id={self.id}, kind={self.kind}, "
            f"referrer_id={self.referrer_id}, amount={self.amount})>"
        )
