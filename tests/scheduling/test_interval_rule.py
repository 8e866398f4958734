"""Interval schedule rule tests."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from fmms.scheduling import IntervalRule

ANCHOR = datetime(2024, 1, 1, 8, 0)


def _rule(**overrides) -> IntervalRule:
    values = {
        "medication_id": 1,
        "interval_amount": 4,
        "interval_unit": "Hours",
        "start_at": ANCHOR,
    }
    values.update(overrides)
    return IntervalRule(**values)


def test_next_dose_from_afternoon() -> None:
    assert _rule().next_dose(datetime(2024, 1, 1, 14, 0)) == datetime(2024, 1, 1, 16, 0)


def test_next_dose_before_anchor_is_anchor() -> None:
    assert _rule().next_dose(datetime(2023, 12, 31, 23, 0)) == ANCHOR


def test_next_dose_on_a_dose_time_moves_to_the_following_one() -> None:
    assert _rule().next_dose(datetime(2024, 1, 1, 16, 0)) == datetime(2024, 1, 1, 20, 0)


def test_day_unit_is_case_insensitive() -> None:
    rule = _rule(interval_amount=2, interval_unit="days")
    assert rule.next_dose(datetime(2024, 1, 2, 9, 0)) == datetime(2024, 1, 3, 8, 0)


def test_next_dose_far_in_the_future_is_computed_directly() -> None:
    rule = _rule(interval_amount=1)
    assert rule.next_dose(datetime(2034, 1, 1, 8, 30)) == datetime(2034, 1, 1, 9, 0)


def test_repeated_next_dose_strictly_advances() -> None:
    rule = _rule(interval_amount=3)
    moment = datetime(2024, 1, 1, 9, 0)
    for _ in range(20):
        upcoming = rule.next_dose(moment)
        assert upcoming is not None
        assert upcoming > moment
        assert upcoming - moment <= timedelta(hours=3)
        moment = upcoming


@pytest.mark.parametrize(
    ("moment", "expected"),
    [
        (datetime(2024, 1, 1, 15, 30), True),
        (datetime(2024, 1, 1, 15, 45), True),
        (datetime(2024, 1, 1, 15, 29), False),
        (datetime(2024, 1, 1, 13, 0), False),
    ],
)
def test_due_within_thirty_minutes_before_next_dose(
    moment: datetime, expected: bool
) -> None:
    assert _rule().is_due_at(moment) is expected


def test_never_due_before_anchor() -> None:
    assert not _rule().is_due_at(datetime(2024, 1, 1, 7, 45))


def test_unknown_unit_yields_nothing() -> None:
    rule = _rule(interval_unit="Weeks")
    assert rule.next_dose(datetime(2024, 1, 1, 7, 0)) is None
    assert not rule.is_due_at(datetime(2024, 1, 1, 11, 45))
    assert rule.configuration_issue() == "unknown interval unit 'Weeks'"


def test_non_positive_amount_yields_nothing() -> None:
    rule = _rule(interval_amount=0)
    assert rule.next_dose(datetime(2024, 1, 1, 9, 0)) is None
    assert rule.configuration_issue() == "interval amount must be positive"


def test_missing_anchor_yields_nothing() -> None:
    rule = _rule(start_at=None)
    assert rule.next_dose(datetime(2024, 1, 1, 9, 0)) is None
    assert not rule.is_due_at(datetime(2024, 1, 1, 9, 0))
    assert rule.configuration_issue() == "no start time configured"


def test_describe() -> None:
    assert _rule().describe() == "Every 4 hour(s)"
    assert _rule(interval_amount=2, interval_unit="Days").describe() == "Every 2 day(s)"
    assert _rule().configuration_issue() is None
