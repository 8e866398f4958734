"""Schedule rule evaluation engine."""

from fmms.scheduling.factory import (
    configurable_fields,
    create_rule,
    resolve_schedule_type,
)
from fmms.scheduling.rules import (
    RULE_TYPES,
    AsNeededRule,
    DailyRule,
    IntervalRule,
    IntervalUnit,
    Rule,
    ScheduleType,
    Weekday,
    WeeklyRule,
    parse_days_of_week,
    parse_times_of_day,
)

__all__ = [
    "RULE_TYPES",
    "AsNeededRule",
    "DailyRule",
    "IntervalRule",
    "IntervalUnit",
    "Rule",
    "ScheduleType",
    "Weekday",
    "WeeklyRule",
    "configurable_fields",
    "create_rule",
    "parse_days_of_week",
    "parse_times_of_day",
    "resolve_schedule_type",
]
