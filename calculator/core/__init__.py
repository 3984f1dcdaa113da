"""
Core calculator functionality.

Yield arithmetic and the models it produces.
"""

from calculator.core.calculator import YieldCalculator, quantize_money
from calculator.core.models import InvestmentTerms, SettlementBreakdown

__all__ = [
    "InvestmentTerms",
    "SettlementBreakdown",
    "YieldCalculator",
    "quantize_money",
]
