"""
Enumerations shared by models, services and the API.
"""

from enum import StrEnum


class DepositStatus(StrEnum):
    """Deposit review status. Transitions are one-way from PENDING."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InvestmentStatus(StrEnum):
    """Investment status: ACTIVE until the sweep settles it."""

    ACTIVE = "active"
    COMPLETED = "completed"


class WithdrawalStatus(StrEnum):
    """Withdrawal processing status."""

    PENDING = "pending"
    PROCESSED = "processed"
    REJECTED = "rejected"


class CommissionKind(StrEnum):
    """Kind of referral commission record."""

    # Zero-amount marker written once per qualified referred user
    QUALIFICATION = "qualification"
    # Share of a matured investment paid to the referrer
    PROFIT_SHARE = "profit_share"


class LifecyclePolicy(StrEnum):
    """How approved deposits become investments."""

    AUTO_INVEST = "auto_invest"
    MANUAL_INVEST = "manual_invest"


class ReferralRewardMode(StrEnum):
    """Which referral reward mechanic a deployment runs."""

    QUALIFICATION = "qualification"
    PROFIT_SHARE = "profit_share"


class AuditAction(StrEnum):
    """Audit trail action names."""

    DEPOSIT_SUBMITTED = "deposit_submitted"
    DEPOSIT_APPROVED = "deposit_approved"
    DEPOSIT_REJECTED = "deposit_rejected"
    DEPOSIT_CREDITED = "deposit_credited"
    INVESTMENT_STARTED = "investment_started"
    INVESTMENT_MATURED = "investment_matured"
    WITHDRAWAL_REQUESTED = "withdrawal_requested"
    WITHDRAWAL_PROCESSED = "withdrawal_processed"
    WITHDRAWAL_REJECTED = "withdrawal_rejected"
    REFERRAL_QUALIFIED = "referral_qualified"
    REFERRAL_MILESTONE_BONUS = "referral_milestone_bonus"
    WELCOME_BONUS_PAID = "welcome_bonus_paid"
    REFERRAL_COMMISSION_PAID = "referral_commission_paid"
    BALANCE_ADJUSTED = "balance_adjusted"
    USER_BLOCKED = "user_blocked"
    USER_UNBLOCKED = "user_unblocked"
