"""
Timezone-aware datetime utilities.

Stored timestamps are epoch milliseconds; dates and times shown next to them
are derived from the same instant.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

# UTC timezone constant
UTC = timezone.utc


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Returns:
        datetime: Current UTC time with tzinfo set to UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware and in UTC.

    Args:
        dt: datetime to convert (can be None, naive, or timezone-aware)

    Returns:
        Optional[datetime]: UTC timezone-aware datetime, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def to_epoch_millis(dt: datetime) -> int:
    """Epoch milliseconds of a datetime (naive values are read as UTC)."""
    return int(ensure_utc(dt).timestamp() * 1000)


def seconds_from_now(seconds: float, now: Optional[datetime] = None) -> datetime:
    """UTC instant ``seconds`` after ``now`` (defaults to the current time)."""
    return (now or now_utc()) + timedelta(seconds=seconds)
