"""
Response serializers.

Render models and service results as camelCase JSON-ready dicts. Money
is a 6-place decimal string, timestamps are ISO 8601 in UTC.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.models import (
    AuditLog,
    Deposit,
    Investment,
    ReferralCommission,
    User,
    Withdrawal,
)
from calculator import format_money


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _rate(value: Decimal | int) -> int | float:
    value = Decimal(value)
    return int(value) if value == value.to_integral_value() else float(value)


def serialize_user(user: User, referral_count: int | None = None) -> dict[str, Any]:
    """Render a user; the password hash never leaves the service."""
    data = {
        "id": user.id,
        "fullName": user.full_name,
        "email": user.email,
        "emailVerified": user.email_verified,
        "referralCode": user.referral_code,
        "referredBy": user.referred_by,
        "qualifiedReferrals": user.qualified_referrals,
        "totalYieldPercent": user.total_yield_percent,
        "welcomeBonusPaid": user.welcome_bonus_paid,
        "referralBonusPaid": user.referral_bonus_paid,
        "balance": format_money(user.balance),
        "isBlocked": user.is_blocked,
        "createdAt": _iso(user.created_at),
    }
    if referral_count is not None:
        data["referralCount"] = referral_count
    return data


def serialize_owner(user: User) -> dict[str, Any]:
    """Short owner block for admin listings."""
    return {"id": user.id, "fullName": user.full_name, "email": user.email}


def serialize_deposit(deposit: Deposit, with_user: bool = False) -> dict[str, Any]:
    data = {
        "id": deposit.id,
        "userId": deposit.user_id,
        "amount": format_money(deposit.amount),
        "txid": deposit.txid,
        "screenshotUrl": deposit.screenshot_url,
        "status": deposit.status,
        "rejectionReason": deposit.rejection_reason,
        "createdAt": _iso(deposit.created_at),
        "reviewedAt": _iso(deposit.reviewed_at),
    }
    if with_user:
        data["user"] = serialize_owner(deposit.user)
    return data


def serialize_investment(
    investment: Investment, with_user: bool = False
) -> dict[str, Any]:
    data = {
        "id": investment.id,
        "userId": investment.user_id,
        "depositId": investment.deposit_id,
        "amount": format_money(investment.amount),
        "profitRate": _rate(investment.profit_rate),
        "startedAt": _iso(investment.started_at),
        "maturesAt": _iso(investment.matures_at),
        "profitPaid": investment.profit_paid,
        "status": investment.status,
        "completedAt": _iso(investment.completed_at),
    }
    if with_user:
        data["user"] = serialize_owner(investment.user)
    return data


def serialize_withdrawal(
    withdrawal: Withdrawal, with_user: bool = False
) -> dict[str, Any]:
    data = {
        "id": withdrawal.id,
        "userId": withdrawal.user_id,
        "amount": format_money(withdrawal.amount),
        "usdtAddress": withdrawal.usdt_address,
        "status": withdrawal.status,
        "rejectionReason": withdrawal.rejection_reason,
        "createdAt": _iso(withdrawal.created_at),
        "processedAt": _iso(withdrawal.processed_at),
    }
    if with_user:
        data["user"] = serialize_owner(withdrawal.user)
    return data


def serialize_commission(commission: ReferralCommission) -> dict[str, Any]:
    return {
        "id": commission.id,
        "referrerId": commission.referrer_id,
        "fromUserId": commission.from_user_id,
        "investmentId": commission.investment_id,
        "kind": commission.kind,
        "amount": format_money(commission.amount),
        "createdAt": _iso(commission.created_at),
    }


def serialize_audit_log(entry: AuditLog) -> dict[str, Any]:
    details: Any = entry.details
    # Structured details are stored as JSON objects, free text as is
    if details and details.startswith("{"):
        details = json.loads(details)
    return {
        "id": entry.id,
        "action": entry.action,
        "targetUserId": entry.target_user_id,
        "details": details,
        "createdAt": _iso(entry.created_at),
    }


def serialize_referral_summary(summary: dict[str, Any]) -> dict[str, Any]:
    """Render ReferralStatisticsManager.get_summary output."""
    data = {
        "mode": summary["mode"],
        "referralCode": summary["referral_code"],
        "totalReferrals": summary["total_referrals"],
        "qualifiedReferrals": summary["qualified_referrals"],
        "currentYield": summary["current_yield"],
        "maxYield": summary["max_yield"],
        "referralBonusPaid": summary["referral_bonus_paid"],
        "isReferred": summary["is_referred"],
        "hasQualifiedDeposit": summary["has_qualified_deposit"],
        "welcomeBonusPaid": summary["welcome_bonus_paid"],
        "referrals": [
            {
                "id": row["id"],
                "fullName": row["full_name"],
                "createdAt": _iso(row["created_at"]),
                "totalDeposited": format_money(row["total_deposited"]),
                "isQualified": row["is_qualified"],
            }
            for row in summary["referrals"]
        ],
    }
    if "tier_percent" in summary:
        data["tierPercent"] = summary["tier_percent"]
        data["totalCommission"] = format_money(summary["total_commission"])
    return data


def serialize_stats(stats: dict[str, Any]) -> dict[str, Any]:
    """Render StatsService.get_platform_stats output."""
    return {
        "totalUsers": stats["total_users"],
        "totalDeposits": format_money(stats["total_deposits"]),
        "totalWithdrawals": format_money(stats["total_withdrawals"]),
        "activeInvestments": stats["active_investments"],
        "activeInvestmentVolume": format_money(stats["active_investment_volume"]),
        "pendingDeposits": stats["pending_deposits"],
        "pendingWithdrawals": stats["pending_withdrawals"],
        "todayProfit": format_money(stats["today_profit"]),
        "totalReferralEarnings": format_money(stats["total_referral_earnings"]),
    }
