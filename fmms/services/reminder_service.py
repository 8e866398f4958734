"""Dose reminders derived from the household's schedules.

Times passed in and returned are household wall-clock values.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fmms.models.schedule_rule import ScheduleRule
from fmms.scheduling import AsNeededRule, DailyRule, IntervalRule, WeeklyRule
from fmms.scheduling.window import format_clock, minute_of_day, start_of_day
from fmms.services import schedule_service

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Medication Reminder"
_MAX_OCCURRENCES_PER_SCHEDULE = 200


def build_medication_reminder(
    *, name: str, dosage: str | None, instructions: str | None
) -> tuple[str, str]:
    """Return the title and body for a dose reminder."""
    message = f"Time to take {name} ({dosage or ''})"
    if instructions and instructions.strip():
        message += f"\n\nInstructions: {instructions.strip()}"
    return REMINDER_TITLE, message


def _scheduled_at(rule: Any, at: datetime) -> datetime | None:
    """Return the dose time that makes ``rule`` due at ``at``, if any."""
    if isinstance(rule, DailyRule):
        minutes = rule.due_time_at(at)
        if minutes is None:
            return None
        return start_of_day(at) + timedelta(minutes=minutes)
    if isinstance(rule, WeeklyRule):
        if not rule.is_due_at(at):
            return None
        return start_of_day(at) + timedelta(minutes=rule.time_of_day)
    if isinstance(rule, IntervalRule):
        if not rule.is_due_at(at):
            return None
        return rule.next_dose(at)
    return None


async def _reminder_candidates(
    session: AsyncSession, household_id: int
) -> list[ScheduleRule]:
    schedules = await schedule_service.list_active_schedules(
        session, household_id=household_id
    )
    return [schedule for schedule in schedules if schedule.medication.is_active]


async def due_reminders(
    session: AsyncSession, *, household_id: int, at: datetime
) -> list[dict[str, Any]]:
    """Reminders for every scheduled dose due at ``at``.

    As-needed schedules never produce reminders.
    """
    reminders: list[dict[str, Any]] = []
    for schedule in await _reminder_candidates(session, household_id):
        rule = schedule_service.evaluable_rule(schedule)
        if isinstance(rule, AsNeededRule):
            continue
        scheduled_at = _scheduled_at(rule, at)
        if scheduled_at is None:
            continue
        medication = schedule.medication
        title, message = build_medication_reminder(
            name=medication.name,
            dosage=medication.dosage,
            instructions=medication.instructions,
        )
        reminders.append(
            {
                "medication_id": medication.id,
                "schedule_id": schedule.id,
                "person_id": medication.person_id,
                "person_name": medication.person.display_name,
                "medication_name": medication.name,
                "dosage": medication.dosage,
                "schedule_type": schedule.schedule_type,
                "scheduled_at": scheduled_at,
                "scheduled_time": format_clock(minute_of_day(scheduled_at)),
                "title": title,
                "message": message,
            }
        )
    logger.debug("Found %d due reminders for household %s", len(reminders), household_id)
    return sorted(reminders, key=lambda item: (item["scheduled_at"], item["medication_name"]))


async def upcoming_doses(
    session: AsyncSession,
    *,
    household_id: int,
    now: datetime,
    horizon: timedelta,
) -> list[dict[str, Any]]:
    """Scheduled doses after ``now`` and no later than ``now + horizon``."""
    until = now + horizon
    entries: list[dict[str, Any]] = []
    for schedule in await _reminder_candidates(session, household_id):
        rule = schedule_service.evaluable_rule(schedule)
        if isinstance(rule, AsNeededRule):
            continue
        description = rule.describe()
        cursor = now
        for _ in range(_MAX_OCCURRENCES_PER_SCHEDULE):
            due_at = rule.next_dose(cursor)
            if due_at is None or due_at > until:
                break
            entries.append(
                {
                    "medication_id": schedule.medication_id,
                    "schedule_id": schedule.id,
                    "person_name": schedule.medication.person.display_name,
                    "medication_name": schedule.medication.name,
                    "schedule_type": schedule.schedule_type,
                    "due_at": due_at,
                    "description": description,
                }
            )
            cursor = due_at
    return sorted(entries, key=lambda item: (item["due_at"], item["medication_name"]))
