"""
Pure business logic calculator for fixed-term yield.

This module contains standalone calculation logic without any
dependencies on database, ORM, or app-specific code. All arithmetic is
Decimal and every money result is quantized to 6 places.
"""

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from calculator.constants import (
    BASE_RATE_PERCENT,
    DEFAULT_TERM_HOURS,
    MONEY_QUANTUM,
    RATE_QUANTUM,
)

if TYPE_CHECKING:
    from calculator.core.models import InvestmentTerms, SettlementBreakdown


def quantize_money(value: Decimal | int | str) -> Decimal:
    """
    Round a money value to 6 decimal places.

    Args:
        value: Amount as Decimal, int or decimal string

    Returns:
        Quantized Decimal

    Example:
        >>> quantize_money(Decimal("1.0000005"))
        Decimal('1.000001')
    """
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


class YieldCalculator:
    """
    Pure business logic calculator for investment yield.

    Provides standalone calculation methods that work with pure data
    types (Decimal, datetime) without any external dependencies.
    """

    def __init__(self, term_hours: int = DEFAULT_TERM_HOURS) -> None:
        """
        Initialize calculator.

        Args:
            term_hours: Length of the fixed investment term
        """
        if term_hours <= 0:
            raise ValueError("term_hours must be positive")
        self.term_hours = term_hours

    def calculate_profit(
        self,
        amount: Decimal,
        rate_percent: Decimal,
    ) -> Decimal:
        """
        Calculate yield for one term.

        Formula: amount * rate_percent / 100

        Args:
            amount: Invested principal
            rate_percent: Yield percent for the term (e.g., 13 = 13%)

        Returns:
            Profit quantized to 6 places

        Example:
            >>> calc = YieldCalculator()
            >>> calc.calculate_profit(Decimal("100"), Decimal("13"))
            Decimal('13.000000')
        """
        if amount <= 0 or rate_percent <= 0:
            return quantize_money(0)

        return quantize_money(amount * rate_percent / 100)

    def calculate_payout(
        self,
        amount: Decimal,
        rate_percent: Decimal,
    ) -> Decimal:
        """
        Calculate principal plus yield.

        Formula: amount + amount * rate_percent / 100

        Args:
            amount: Invested principal
            rate_percent: Yield percent for the term

        Returns:
            Payout quantized to 6 places

        Example:
            >>> calc = YieldCalculator()
            >>> calc.calculate_payout(Decimal("100"), Decimal("13"))
            Decimal('113.000000')
        """
        if amount <= 0:
            return quantize_money(0)

        return quantize_money(amount) + self.calculate_profit(amount, rate_percent)

    def calculate_maturity(self, started_at: datetime) -> datetime:
        """
        Calculate when an investment started at started_at matures.

        Args:
            started_at: Start of the term

        Returns:
            started_at plus the fixed term
        """
        return started_at + timedelta(hours=self.term_hours)

    def is_matured(self, matures_at: datetime, now: datetime) -> bool:
        """Check if a maturity instant has passed."""
        return matures_at <= now

    def calculate_referral_share(
        self,
        amount: Decimal,
        tier_percent: Decimal | int,
        base_percent: Decimal = BASE_RATE_PERCENT,
    ) -> Decimal:
        """
        Calculate a referrer's share of an investment.

        The referrer earns the difference between the investment's tier
        rate and the base rate, applied to the referred user's principal.

        Formula: amount * (tier_percent - base_percent) / 100

        Args:
            amount: Referred user's invested principal
            tier_percent: Tier rate snapshotted on the investment
            base_percent: Rate every investor receives

        Returns:
            Share quantized to 6 places, zero at or below the base tier

        Example:
            >>> calc = YieldCalculator()
            >>> calc.calculate_referral_share(Decimal("100"), 13)
            Decimal('3.000000')
        """
        spread = Decimal(tier_percent) - base_percent
        if amount <= 0 or spread <= 0:
            return quantize_money(0)

        return quantize_money(amount * spread / 100)

    def build_terms(
        self,
        amount: Decimal,
        rate_percent: Decimal | int,
        started_at: datetime,
    ) -> "InvestmentTerms":
        """
        Snapshot the terms of a new investment.

        Args:
            amount: Principal copied from the deposit
            rate_percent: User's yield rate at this instant
            started_at: Start of the term

        Returns:
            InvestmentTerms with quantized amount and rate
        """
        from calculator.core.models import InvestmentTerms

        return InvestmentTerms(
            amount=quantize_money(amount),
            rate_percent=Decimal(rate_percent).quantize(RATE_QUANTUM),
            started_at=started_at,
            matures_at=self.calculate_maturity(started_at),
        )

    def settle(
        self,
        amount: Decimal,
        rate_percent: Decimal,
    ) -> "SettlementBreakdown":
        """
        Compute the settlement breakdown of a matured investment.

        Args:
            amount: Invested principal
            rate_percent: Snapshotted yield percent

        Returns:
            SettlementBreakdown with principal, profit and payout
        """
        from calculator.core.models import SettlementBreakdown

        profit = self.calculate_profit(amount, rate_percent)
        return SettlementBreakdown(
            principal=quantize_money(amount),
            rate_percent=Decimal(rate_percent),
            profit=profit,
            payout=quantize_money(amount) + profit,
        )
