"""Time-of-day helpers shared by the schedule rules."""

from __future__ import annotations

from datetime import datetime, time, timedelta

MINUTES_PER_DAY = 24 * 60

DAILY_DUE_WINDOW_MINUTES = 15
WEEKLY_DUE_WINDOW_MINUTES = 15
INTERVAL_DUE_WINDOW_MINUTES = 30


def is_valid_minute_of_day(value: int) -> bool:
    return 0 <= value < MINUTES_PER_DAY


def minute_of_day(moment: datetime) -> int:
    """Return whole minutes since midnight, dropping seconds."""
    return moment.hour * 60 + moment.minute


def start_of_day(moment: datetime) -> datetime:
    """Midnight of ``moment``'s calendar day, keeping its tzinfo."""
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def minutes_within(first: int, second: int, tolerance: int) -> bool:
    """Compare two minute-of-day values against a symmetric tolerance."""
    return abs(first - second) <= tolerance


def within_window(moment: datetime, target: datetime, tolerance: timedelta) -> bool:
    return abs(moment - target) <= tolerance


def format_clock(minutes: int) -> str:
    """Render minutes since midnight as a 12-hour clock string, e.g. ``8:05 PM``."""
    hours, mins = divmod(minutes, 60)
    suffix = "PM" if hours >= 12 else "AM"
    if hours > 12:
        display = hours - 12
    elif hours == 0:
        display = 12
    else:
        display = hours
    return f"{display}:{mins:02d} {suffix}"


__all__ = [
    "DAILY_DUE_WINDOW_MINUTES",
    "INTERVAL_DUE_WINDOW_MINUTES",
    "MINUTES_PER_DAY",
    "WEEKLY_DUE_WINDOW_MINUTES",
    "format_clock",
    "is_valid_minute_of_day",
    "minute_of_day",
    "minutes_within",
    "start_of_day",
    "within_window",
]
