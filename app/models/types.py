"""
Standard type definitions for database models.

Provides consistent types for monetary, percentage and timestamp fields
across all models.
"""

from datetime import UTC, datetime

from sqlalchemy import DECIMAL, DateTime
from sqlalchemy.types import TypeDecorator

# Standard money type for balances, deposits, payouts, commissions
# Precision: 20 digits total, 6 after decimal point
# Range: up to 99,999,999,999,999.999999
MoneyType = DECIMAL(20, 6)

# Standard percentage type for snapshotted profit rates
# Precision: 5 digits total, 2 after decimal point
# Range: 0.00 to 999.99
PercentType = DECIMAL(5, 2)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp stored in UTC.

    Backends without native timezone support (SQLite) hand back naive
    values; those are re-tagged as UTC so comparisons in Python never
    mix naive and aware datetimes.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
