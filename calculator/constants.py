"""
Default constants for the yield calculator.

Kept free of application imports so the calculator can be used on its own.
"""

from decimal import Decimal

# Money is carried with 6 decimal places end to end
MONEY_SCALE = 6
MONEY_QUANTUM = Decimal("0.000001")

# Rates are stored with 2 decimal places
RATE_QUANTUM = Decimal("0.01")

# Fixed investment term
DEFAULT_TERM_HOURS = 72

# Rate every referral tier is measured against
BASE_RATE_PERCENT = Decimal("10")
