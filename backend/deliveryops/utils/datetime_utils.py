"""
Timezone-aware datetime utilities.

All persisted datetimes are UTC and timezone-aware; these helpers keep date
arithmetic consistent across the scheduler.
"""

from datetime import date, datetime, timedelta, timezone
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

    Naive datetimes (as returned by SQLite) are assumed to be UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_iso_to_utc(iso_string: str) -> datetime:
    """
    Parse ISO datetime string to UTC timezone-aware datetime.

    Handles a 'Z' suffix, explicit offsets and naive strings (assumed UTC).

    Raises:
        ValueError: If the string cannot be parsed
    """
    normalized = iso_string.replace("Z", "+00:00")
    return ensure_utc(datetime.fromisoformat(normalized))


def add_days(dt: datetime, days: int) -> datetime:
    """Return dt shifted by a whole number of days."""
    return dt + timedelta(days=days)


def subtract_days(dt: datetime, days: int) -> datetime:
    """Return dt shifted back by a whole number of days."""
    return add_days(dt, -days)


def days_until(target: datetime, now: Optional[datetime] = None) -> int:
    """
    Calendar days from today to the target's date (UTC).

    Negative when the target date is in the past.

    Example:
        >>> days_until(datetime(2025, 1, 10, 8, tzinfo=UTC), datetime(2025, 1, 8, 23, tzinfo=UTC))
        2
    """
    now = ensure_utc(now) if now else now_utc()
    today: date = now.date()
    return (ensure_utc(target).date() - today).days


def format_fr_date(dt: datetime) -> str:
    """Format a date the way French recipients read it (dd/mm/YYYY)."""
    return ensure_utc(dt).strftime("%d/%m/%Y")
