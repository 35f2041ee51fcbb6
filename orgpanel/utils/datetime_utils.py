# orgpanel/utils/datetime_utils.py
"""
Strict UTC datetime handling to prevent timezone drift.
All timestamps are stored as naive UTC and serialized with a 'Z' suffix.
"""
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

SECONDS_PER_DAY = 24 * 60 * 60


def get_utc_now() -> datetime:
    """
    Get current UTC time as naive datetime.
    Use this instead of datetime.utcnow().
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime to ISO string with UTC timezone.

    Args:
        dt: datetime object (assumed UTC if naive)

    Returns:
        ISO format string with 'Z' suffix (UTC)
    """
    if dt is None:
        return None

    dt_utc = to_naive_utc(dt)
    return dt_utc.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


def days_until(target: datetime, now: datetime) -> int:
    """Whole days left until `target`, rounded up. Zero or negative once reached."""
    remaining = (to_naive_utc(target) - to_naive_utc(now)) / timedelta(seconds=SECONDS_PER_DAY)
    return math.ceil(remaining)

