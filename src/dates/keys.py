"""
Calendar Keys

Records are keyed by canonical date strings of the form YYYY-MM-DD.

DESIGN DECISION: All arithmetic uses the device-local calendar
(`datetime.date`), never a UTC-normalized one. "Today" is whatever the
user's clock says, so a workout logged at 23:30 lands on the user's day.

A "week" here is a rolling 7-day window anchored on the day it was
opened, not a Monday-based calendar week.
"""

from datetime import date, timedelta
from typing import Optional


# Python's date.weekday() order (Monday == 0)
WEEKDAY_LABELS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def format_key(day: date) -> str:
    """Format a civil date as a zero-padded canonical key."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_key(key: str) -> date:
    """
    Parse a canonical key into a civil date.

    Only keys produced by format_key are expected here.

    Raises:
        ValueError: If the key is not three numeric segments forming a real date
    """
    parts = key.split("-")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Malformed date key: {key!r}")
    year, month, day = (int(part) for part in parts)
    return date(year, month, day)


def today_key(today: Optional[date] = None) -> str:
    """Canonical key for the current device-local date."""
    return format_key(today or date.today())


def add_days(key: str, days: int) -> str:
    """Shift a key by a number of civil days (negative goes back)."""
    return format_key(parse_key(key) + timedelta(days=days))


def is_today(key: str, today: Optional[date] = None) -> bool:
    return key == today_key(today)


def compare_keys(first: str, second: str) -> int:
    """Return -1, 0 or 1 as the first key is before, equal to or after the second."""
    a, b = parse_key(first), parse_key(second)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def offset_from_today(label: str, today: Optional[date] = None) -> int:
    """
    Days ahead (0-6) until the next occurrence of a weekday label.

    Today's weekday is offset 0; earlier weekdays wrap forward, so on a
    Friday "thursday" is 6, never -1.

    Raises:
        ValueError: If the label is not a weekday name
    """
    normalized = str(label).strip().lower()
    if normalized not in WEEKDAY_LABELS:
        raise ValueError(f"Unknown weekday label: {label!r}")
    current = (today or date.today()).weekday()
    return (WEEKDAY_LABELS.index(normalized) - current) % 7


def week_anchor_key(today: Optional[date] = None) -> str:
    """The anchor of the current rolling week: today's key."""
    return today_key(today)


def step_week(anchor_key: str, weeks: int) -> str:
    """Move a week anchor by whole weeks (+1 next, -1 previous)."""
    return add_days(anchor_key, 7 * weeks)


def date_key_for_day(week_key: str, offset: int) -> str:
    """Key of the day `offset` days into the week anchored at week_key."""
    return add_days(week_key, offset)
