"""
Shared date helpers.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from .models import WEEKS_PER_YEAR


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def date_from_epoch_millis(value: int) -> date:
    """Convert a millisecond epoch timestamp to a UTC calendar date."""
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc).date()


def weeks_between(start: date, end: date) -> int:
    """Whole weeks elapsed from start to end, truncated towards zero."""
    days = (end - start).days
    if days < 0:
        return -((-days) // 7)
    return days // 7


def weeks_to_years(weeks: int) -> float:
    return weeks / WEEKS_PER_YEAR


def today_utc() -> date:
    return datetime.now(timezone.utc).date()
