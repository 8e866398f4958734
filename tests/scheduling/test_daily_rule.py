"""Daily schedule rule tests."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from fmms.scheduling import DailyRule

MORNING_AND_EVENING = (480, 1200)


def _at(hour: int, minute: int = 0, *, day: int = 1, second: int = 0) -> datetime:
    return datetime(2024, 1, day, hour, minute, second)


def test_next_dose_later_same_day() -> None:
    rule = DailyRule(medication_id=1, times_of_day=MORNING_AND_EVENING)
    assert rule.next_dose(_at(14)) == _at(20)


def test_next_dose_wraps_to_first_time_tomorrow() -> None:
    rule = DailyRule(medication_id=1, times_of_day=MORNING_AND_EVENING)
    assert rule.next_dose(_at(21)) == _at(8, day=2)


def test_next_dose_is_strictly_after_reference() -> None:
    rule = DailyRule(medication_id=1, times_of_day=MORNING_AND_EVENING)
    assert rule.next_dose(_at(8)) == _at(20)


def test_next_dose_never_decreases_through_the_day() -> None:
    rule = DailyRule(medication_id=1, times_of_day=(300, 720, 1080))
    start = _at(0)
    previous = None
    for minutes in range(0, 24 * 60, 7):
        upcoming = rule.next_dose(start + timedelta(minutes=minutes))
        assert upcoming is not None
        if previous is not None:
            assert upcoming >= previous
        previous = upcoming


@pytest.mark.parametrize(
    ("moment", "expected"),
    [
        (_at(8), True),
        (_at(8, 15), True),
        (_at(7, 45), True),
        (_at(8, 16), False),
        (_at(7, 44), False),
        (_at(20, 10, day=9), True),
        (_at(8, 15, second=59), True),
    ],
)
def test_due_window_is_fifteen_minutes(moment: datetime, expected: bool) -> None:
    rule = DailyRule(medication_id=1, times_of_day=MORNING_AND_EVENING)
    assert rule.is_due_at(moment) is expected


def test_due_window_does_not_wrap_midnight() -> None:
    rule = DailyRule(medication_id=1, times_of_day=(5,))
    assert rule.is_due_at(_at(0, 10))
    assert not rule.is_due_at(_at(23, 55))


def test_due_time_at_reports_matching_offset() -> None:
    rule = DailyRule(medication_id=1, times_of_day=MORNING_AND_EVENING)
    assert rule.due_time_at(_at(19, 50)) == 1200
    assert rule.due_time_at(_at(12)) is None


def test_stored_offsets_are_cleaned() -> None:
    rule = DailyRule(medication_id=1, times_of_day="480, abc, 1500, -1, 480, 60")
    assert rule.times_of_day == (60, 480)


def test_empty_rule_never_fires() -> None:
    rule = DailyRule(medication_id=1)
    assert rule.next_dose(_at(9)) is None
    assert not rule.is_due_at(_at(9))
    assert rule.configuration_issue() == "no times of day configured"


def test_inactive_rule_fails_closed() -> None:
    rule = DailyRule(medication_id=1, times_of_day=MORNING_AND_EVENING, is_active=False)
    assert rule.next_dose(_at(9)) is None
    assert not rule.is_due_at(_at(8))


def test_describe() -> None:
    assert (
        DailyRule(medication_id=1, times_of_day=MORNING_AND_EVENING).describe()
        == "Daily at 8:00 AM, 8:00 PM"
    )
    assert (
        DailyRule(medication_id=1, times_of_day=(0, 720)).describe()
        == "Daily at 12:00 AM, 12:00 PM"
    )
    assert DailyRule(medication_id=1).describe() == "Daily (no times specified)"
