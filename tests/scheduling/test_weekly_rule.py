"""Weekly schedule rule tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from fmms.scheduling import Weekday, WeeklyRule

# 2024-01-07 is a Sunday and 2024-01-08 a Monday.
SUNDAY = datetime(2024, 1, 7, 14, 0)


def _rule(days=("Monday", "Wednesday"), time_of_day: int = 540, **extra) -> WeeklyRule:
    return WeeklyRule(medication_id=1, days_of_week=days, time_of_day=time_of_day, **extra)


def test_next_dose_from_sunday_afternoon() -> None:
    assert _rule().next_dose(SUNDAY) == datetime(2024, 1, 8, 9, 0)


def test_next_dose_later_today() -> None:
    assert _rule().next_dose(datetime(2024, 1, 8, 8, 0)) == datetime(2024, 1, 8, 9, 0)


def test_next_dose_after_todays_time_moves_to_next_day() -> None:
    assert _rule().next_dose(datetime(2024, 1, 8, 9, 0)) == datetime(2024, 1, 10, 9, 0)


def test_single_day_wraps_a_full_week() -> None:
    rule = _rule(days=("Monday",))
    assert rule.next_dose(datetime(2024, 1, 8, 10, 0)) == datetime(2024, 1, 15, 9, 0)


def test_due_only_on_configured_days_within_window() -> None:
    rule = _rule()
    assert rule.is_due_at(datetime(2024, 1, 8, 9, 15))
    assert rule.is_due_at(datetime(2024, 1, 10, 8, 45))
    assert not rule.is_due_at(datetime(2024, 1, 8, 9, 16))
    assert not rule.is_due_at(datetime(2024, 1, 9, 9, 0))


@pytest.mark.parametrize(
    ("moment", "expected"),
    [
        (datetime(2024, 1, 8, 9, 0), True),
        (datetime(2024, 1, 8, 9, 15), True),
        (datetime(2024, 1, 8, 8, 45), True),
        (datetime(2024, 1, 8, 9, 16), False),
        (datetime(2024, 1, 8, 8, 44), False),
    ],
)
def test_due_window_is_fifteen_minutes_either_side(moment: datetime, expected: bool) -> None:
    assert _rule().is_due_at(moment) is expected


def test_day_names_are_parsed_case_insensitively_in_configured_order() -> None:
    rule = _rule(days=("wednesday", "MONDAY", "Wednesday", "Funday"))
    assert rule.days_of_week == (Weekday.WEDNESDAY, Weekday.MONDAY)
    assert rule.describe() == "Weekly on Wednesday, Monday at 9:00 AM"


def test_every_day_reads_as_daily() -> None:
    rule = _rule(days=tuple(day.label for day in Weekday), time_of_day=1290)
    assert rule.describe() == "Daily at 9:30 PM"


def test_no_days_never_fires() -> None:
    rule = _rule(days=())
    assert rule.next_dose(SUNDAY) is None
    assert not rule.is_due_at(datetime(2024, 1, 8, 9, 0))
    assert rule.describe() == "Weekly (no days specified)"
    assert rule.configuration_issue() == "no days of week configured"


def test_out_of_range_time_fails_closed() -> None:
    rule = _rule(time_of_day=1440)
    assert rule.next_dose(SUNDAY) is None
    assert rule.configuration_issue() == "time of day 1440 is outside 0-1439"


def test_inactive_rule_fails_closed() -> None:
    rule = _rule(is_active=False)
    assert rule.next_dose(SUNDAY) is None
    assert not rule.is_due_at(datetime(2024, 1, 8, 9, 0))


def test_default_time_is_eight_am() -> None:
    rule = WeeklyRule(medication_id=1, days_of_week=("Friday",))
    assert rule.describe() == "Weekly on Friday at 8:00 AM"
