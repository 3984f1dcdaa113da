"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.audit_log import AuditLog
from app.models.base import Base
from app.models.deposit import Deposit
from app.models.enums import (
    AuditAction,
    CommissionKind,
    DepositStatus,
    InvestmentStatus,
    LifecyclePolicy,
    ReferralRewardMode,
    WithdrawalStatus,
)
from app.models.investment import Investment
from app.models.referral_commission import ReferralCommission
from app.models.user import User
from app.models.withdrawal import Withdrawal

__all__ = [
    "AuditAction",
    "AuditLog",
    "Base",
    "CommissionKind",
    "Deposit",
    "DepositStatus",
    "Investment",
    "InvestmentStatus",
    "LifecyclePolicy",
    "ReferralCommission",
    "ReferralRewardMode",
    "User",
    "Withdrawal",
    "WithdrawalStatus",
]
