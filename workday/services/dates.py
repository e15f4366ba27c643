"""
Calendar helpers shared by the rule-sets.

Instants are stored in UTC; calendar days are always taken in the
configured reference time zone.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal


def ensure_utc(dt: datetime) -> datetime:
    """Normalise a potentially-naive timestamp (SQLite read-back) to UTC-aware."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def localize(dt: datetime, tz: tzinfo) -> datetime:
    """Attach the reference zone to naive client input; convert aware input to UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt.astimezone(timezone.utc)


def local_day(instant: datetime, tz: tzinfo) -> date:
    """Calendar day *instant* falls on in the reference zone."""
    return ensure_utc(instant).astimezone(tz).date()


def month_bounds(day: date) -> tuple[date, date]:
    """First and last calendar day of the month containing *day*."""
    _, days_in_month = calendar.monthrange(day.year, day.month)
    return day.replace(day=1), day.replace(day=days_in_month)


def inclusive_days(from_date: date, to_date: date) -> int:
    """Number of calendar days in [from_date, to_date]; <= 0 when reversed."""
    return (to_date - from_date).days + 1


def whole_minutes(start: datetime, end: datetime) -> int:
    """Floor of the elapsed minutes between two instants."""
    return (end - start) // timedelta(minutes=1)


def elapsed_hours(start: datetime, end: datetime) -> float:
    """Elapsed hours rounded half-up to two decimals; negative if *end* precedes *start*."""
    hours = (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600
    # Ties on the exact binary value round away from zero (0.125 -> 0.13)
    return float(Decimal(hours).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
