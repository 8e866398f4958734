"""Schedule factory and shared contract tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from fmms.scheduling import (
    AsNeededRule,
    DailyRule,
    IntervalRule,
    ScheduleType,
    WeeklyRule,
    configurable_fields,
    create_rule,
    resolve_schedule_type,
)
from fmms.scheduling.window import format_clock

NOON = datetime(2024, 1, 1, 12, 0)


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("Daily", DailyRule),
        ("daily", DailyRule),
        ("INTERVAL", IntervalRule),
        ("Weekly", WeeklyRule),
        ("AsNeeded", AsNeededRule),
        ("as-needed", AsNeededRule),
        ("prn", AsNeededRule),
        (" weekly ", WeeklyRule),
    ],
)
def test_create_rule_from_tag(tag: str, expected: type) -> None:
    rule = create_rule(tag, 42)
    assert isinstance(rule, expected)
    assert rule.medication_id == 42
    assert rule.is_active


@pytest.mark.parametrize("tag", ["", "monthly", "daily-ish"])
def test_unknown_tag_raises(tag: str) -> None:
    with pytest.raises(ValueError, match="Unknown schedule type"):
        create_rule(tag, 1)


def test_fresh_rules_are_unscheduled() -> None:
    for tag in ("Daily", "Interval", "Weekly"):
        rule = create_rule(tag, 1)
        assert rule.next_dose(NOON) is None
        assert not rule.is_due_at(NOON)
        assert rule.configuration_issue() is not None
    as_needed = create_rule("AsNeeded", 1)
    assert as_needed.next_dose(NOON) is None
    assert as_needed.is_due_at(NOON)


@pytest.mark.parametrize(
    ("tag", "keyword"),
    [("Daily", "Daily"), ("Interval", "Every"), ("Weekly", "Weekly"), ("AsNeeded", "As needed")],
)
def test_descriptions_name_their_pattern(tag: str, keyword: str) -> None:
    assert keyword in create_rule(tag, 1).describe()


def test_schedule_type_tags() -> None:
    assert resolve_schedule_type("prn") is ScheduleType.AS_NEEDED
    assert [t.value for t in ScheduleType] == ["Daily", "Interval", "Weekly", "AsNeeded"]


def test_configurable_fields() -> None:
    assert configurable_fields(ScheduleType.DAILY) == {"times_of_day", "is_active", "notes"}
    assert "start_at" in configurable_fields(ScheduleType.INTERVAL)
    assert "medication_id" not in configurable_fields(ScheduleType.WEEKLY)


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [(0, "12:00 AM"), (5, "12:05 AM"), (480, "8:00 AM"), (720, "12:00 PM"), (1439, "11:59 PM")],
)
def test_format_clock(minutes: int, expected: str) -> None:
    assert format_clock(minutes) == expected
