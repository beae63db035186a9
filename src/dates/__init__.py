"""Calendar key package."""

from src.dates.keys import (
    WEEKDAY_LABELS,
    add_days,
    compare_keys,
    date_key_for_day,
    format_key,
    is_today,
    offset_from_today,
    parse_key,
    step_week,
    today_key,
    week_anchor_key,
)

__all__ = [
    "WEEKDAY_LABELS",
    "add_days",
    "compare_keys",
    "date_key_for_day",
    "format_key",
    "is_today",
    "offset_from_today",
    "parse_key",
    "step_week",
    "today_key",
    "week_anchor_key",
]
