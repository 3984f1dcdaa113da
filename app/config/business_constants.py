"""
Business logic constants for the Yieldly platform.

Central location for business rules used across services, the API and
the calculator. Imports nothing from app.services so it can be used
anywhere without circular dependencies.
"""

from decimal import Decimal

# Money is stored with 6 decimal places
MONEY_SCALE = 6
MONEY_QUANTUM = Decimal("0.000001")

# Intake minimums (USDT)
MIN_DEPOSIT_AMOUNT = Decimal("5")
MIN_WITHDRAWAL_AMOUNT = Decimal("20")
MIN_USDT_ADDRESS_LENGTH = 10
MIN_REJECTION_REASON_LENGTH = 10

# Investment term
INVESTMENT_TERM_HOURS = 72

# Yield rates (percent per term)
BASE_YIELD_PERCENT = 10
MAX_YIELD_PERCENT = 30
REFERRED_USER_YIELD_PERCENT = 11

# Referral qualification
QUALIFICATION_THRESHOLD = Decimal("50")
WELCOME_BONUS_AMOUNT = Decimal("5")
MILESTONE_BONUS_AMOUNT = Decimal("30")
MILESTONE_QUALIFIED_REFERRALS = 20

# Profit-share tiers: direct referral count -> investment yield percent.
# The referrer earns (tier - BASE_YIELD_PERCENT)% of the investment.
PROFIT_SHARE_TIERS: list[tuple[int, int]] = [
    (3, 13),
    (2, 12),
    (1, 11),
    (0, 10),
]

# Registration
REFERRAL_CODE_PREFIX = "YLD"
REFERRAL_CODE_LENGTH = 5
REFERRAL_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
REFERRAL_CODE_MAX_ATTEMPTS = 10
MIN_PASSWORD_LENGTH = 8
MIN_FULL_NAME_LENGTH = 2

# Admin console
AUDIT_LOG_LIMIT = 100


def get_profit_share_tier(referral_count: int) -> int:
    """
    Get tiered yield percent for a direct referral count.

    Args:
        referral_count: Number of users referred directly

    Returns:
        Yield percent for the tier (10-13)
    """
    for min_referrals, percent in PROFIT_SHARE_TIERS:
        if referral_count >= min_referrals:
            return percent
    return BASE_YIELD_PERCENT
