"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def utc_day_start(moment: datetime | None = None) -> datetime:
    """
    Get midnight UTC of the day containing moment.

    Args:
        moment: Reference datetime, defaults to now

    Returns:
        Start of the UTC day
    """
    moment = moment or utc_now()
    return moment.astimezone(UTC).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
