"""Construct schedule rules from their type tags."""

from __future__ import annotations

from dataclasses import fields

from fmms.scheduling.rules import RULE_TYPES, Rule, ScheduleType

_TAG_ALIASES: dict[str, ScheduleType] = {
    "daily": ScheduleType.DAILY,
    "interval": ScheduleType.INTERVAL,
    "weekly": ScheduleType.WEEKLY,
    "asneeded": ScheduleType.AS_NEEDED,
    "as-needed": ScheduleType.AS_NEEDED,
    "prn": ScheduleType.AS_NEEDED,
}


def resolve_schedule_type(tag: str | ScheduleType) -> ScheduleType:
    """Map a case-insensitive tag to its :class:`ScheduleType`.

    Raises ``ValueError`` for anything that is not a known tag.
    """
    if isinstance(tag, ScheduleType):
        return tag
    schedule_type = _TAG_ALIASES.get((tag or "").strip().lower())
    if schedule_type is None:
        raise ValueError(f"Unknown schedule type: {tag}")
    return schedule_type


def create_rule(tag: str | ScheduleType, medication_id: int) -> Rule:
    """Return an empty rule of the tagged type bound to ``medication_id``."""
    return RULE_TYPES[resolve_schedule_type(tag)](medication_id=medication_id)


def configurable_fields(schedule_type: ScheduleType) -> frozenset[str]:
    """Names a caller may set on a rule of ``schedule_type``."""
    rule_type = RULE_TYPES[schedule_type]
    return frozenset(f.name for f in fields(rule_type) if f.name != "medication_id")


__all__ = ["configurable_fields", "create_rule", "resolve_schedule_type"]
