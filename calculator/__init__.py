"""
Yieldly yield calculator.

Standalone package for fixed-term investment arithmetic.

Example:
    >>> from calculator import YieldCalculator
    >>> from decimal import Decimal
    >>>
    >>> calc = YieldCalculator()
    >>> breakdown = calc.settle(Decimal("100"), Decimal("13"))
    >>> print(f"Payout: {breakdown.payout} USDT")
    Payout: 113.000000 USDT
"""

from calculator.constants import (
    BASE_RATE_PERCENT,
    DEFAULT_TERM_HOURS,
    MONEY_QUANTUM,
    MONEY_SCALE,
)
from calculator.core.calculator import YieldCalculator, quantize_money
from calculator.core.models import InvestmentTerms, SettlementBreakdown
from calculator.utils import (
    format_currency,
    format_money,
    format_percentage,
)

__version__ = "1.0.0"
__all__ = [
    # Core
    "YieldCalculator",
    "quantize_money",
    # Models
    "InvestmentTerms",
    "SettlementBreakdown",
    # Constants
    "BASE_RATE_PERCENT",
    "DEFAULT_TERM_HOURS",
    "MONEY_QUANTUM",
    "MONEY_SCALE",
    # Formatters
    "format_currency",
    "format_money",
    "format_percentage",
]
