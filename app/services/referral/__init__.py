"""
Referral services package.

Contains modular services for referral processing:
- qualification_engine: One-time rewards when a referred user qualifies
- profit_share: Legacy tiered commissions paid at settlement
- statistics: Referral summary and commission listings
"""

from app.services.referral.profit_share import ProfitShareRewarder
from app.services.referral.qualification_engine import (
    QualificationOutcome,
    ReferralQualificationEngine,
)
from app.services.referral.statistics import ReferralStatisticsManager


__all__ = [
    "ProfitShareRewarder",
    "QualificationOutcome",
    "ReferralQualificationEngine",
    "ReferralStatisticsManager",
]
