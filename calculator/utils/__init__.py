"""
Utility functions for calculator.

Helpers for rendering money and percentages.
"""

from calculator.utils.formatters import (
    format_currency,
    format_money,
    format_percentage,
)

__all__ = [
    "format_currency",
    "format_money",
    "format_percentage",
]
