"""
Type definitions for calculator module.

TypedDict shapes produced by the calculator for logging and audit trails.
"""

from typing import TypedDict


class SettlementDetailsDict(TypedDict):
    """
    Settlement breakdown rendered as strings.

    Attributes:
        principal: Invested amount
        profit_rate: Rate percent for the term
        profit: Yield earned
        payout: Principal plus yield
    """
    principal: str
    profit_rate: str
    profit: str
    payout: str
