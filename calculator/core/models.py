"""Pydantic models for calculator."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from calculator.types import SettlementDetailsDict
from calculator.utils.formatters import format_money


class InvestmentTerms(BaseModel):
    """Terms fixed when an investment starts.

    Rate and maturity are snapshotted and never repriced.
    """

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., gt=0, description="Invested principal")
    rate_percent: Decimal = Field(..., ge=0, description="Yield percent for the term")
    started_at: datetime = Field(..., description="Start of the term (UTC)")
    matures_at: datetime = Field(..., description="End of the term (UTC)")


class SettlementBreakdown(BaseModel):
    """Result of settling a matured investment."""

    model_config = ConfigDict(frozen=True)

    principal: Decimal = Field(..., ge=0, description="Invested amount")
    rate_percent: Decimal = Field(..., ge=0, description="Yield percent for the term")
    profit: Decimal = Field(..., ge=0, description="Yield earned")
    payout: Decimal = Field(..., ge=0, description="Principal plus yield")

    def as_details(self) -> SettlementDetailsDict:
        """Render the breakdown as strings for audit entries."""
        return SettlementDetailsDict(
            principal=format_money(self.principal),
            profit_rate=str(self.rate_percent),
            profit=format_money(self.profit),
            payout=format_money(self.payout),
        )
