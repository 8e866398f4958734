"""Schedule rule services."""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Sequence
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fmms.core.timezones import to_local_naive
from fmms.models.medication import Medication
from fmms.models.person import Person
from fmms.models.schedule_rule import AsNeededSchedule, ScheduleRule
from fmms.scheduling import (
    AsNeededRule,
    Rule,
    ScheduleType,
    Weekday,
    configurable_fields,
    create_rule,
    resolve_schedule_type,
)
from fmms.schemas.schedule import ScheduleCreate, ScheduleFields, ScheduleUpdate

logger = logging.getLogger(__name__)


def evaluable_rule(schedule: ScheduleRule) -> Rule:
    """Return the rule value for ``schedule``, warning when it can never fire."""
    rule = schedule.as_rule()
    if rule.is_active:
        issue = rule.configuration_issue()
        if issue is not None:
            logger.warning(
                "Schedule %s (%s) for medication %s is misconfigured: %s",
                schedule.id,
                schedule.schedule_type,
                schedule.medication_id,
                issue,
            )
    return rule


def _coerce_updates(
    schedule_type: ScheduleType, payload: ScheduleFields, *, tz: ZoneInfo
) -> dict[str, Any]:
    updates = payload.model_dump(exclude_unset=True, exclude={"schedule_type"})
    allowed = configurable_fields(schedule_type)
    foreign = sorted(name for name in updates if name not in allowed)
    if foreign:
        raise ValueError(
            f"{', '.join(foreign)} cannot be set on a {schedule_type.value} schedule"
        )
    for name in ("is_active", "interval_amount", "interval_unit", "time_of_day",
                 "minimum_hours_between_doses"):
        if name in updates and updates[name] is None:
            del updates[name]
    if "times_of_day" in updates:
        updates["times_of_day"] = tuple(updates["times_of_day"] or ())
    if "days_of_week" in updates:
        days = []
        for name in updates["days_of_week"] or ():
            day = Weekday.parse(name)
            if day is None:
                raise ValueError(f"Unknown day of week: {name}")
            days.append(day)
        updates["days_of_week"] = tuple(days)
    if updates.get("start_at") is not None:
        updates["start_at"] = to_local_naive(updates["start_at"], tz)
    return updates


async def list_schedules(
    session: AsyncSession, *, medication_id: int, include_deleted: bool = False
) -> Sequence[ScheduleRule]:
    """Return the schedules of a medication in creation order."""
    stmt = (
        select(ScheduleRule)
        .where(ScheduleRule.medication_id == medication_id)
        .order_by(ScheduleRule.created_at, ScheduleRule.id)
    )
    if not include_deleted:
        stmt = stmt.where(ScheduleRule.is_deleted.is_(False))
    result = await session.execute(stmt)
    return result.scalars().all()


async def list_active_schedules(
    session: AsyncSession, *, household_id: int
) -> Sequence[ScheduleRule]:
    """Active schedules of live medications across the household."""
    stmt = (
        select(ScheduleRule)
        .join(ScheduleRule.medication)
        .join(Medication.person)
        .options(selectinload(ScheduleRule.medication).selectinload(Medication.person))
        .where(
            Person.household_id == household_id,
            Person.is_deleted.is_(False),
            Medication.is_deleted.is_(False),
            ScheduleRule.is_active.is_(True),
            ScheduleRule.is_deleted.is_(False),
        )
        .order_by(ScheduleRule.created_at, ScheduleRule.id)
    )
    result = await session.execute(stmt)
    return result.scalars().unique().all()


async def get_schedule(
    session: AsyncSession, *, medication_id: int, schedule_id: int
) -> ScheduleRule | None:
    stmt = select(ScheduleRule).where(
        ScheduleRule.id == schedule_id,
        ScheduleRule.medication_id == medication_id,
        ScheduleRule.is_deleted.is_(False),
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_schedule(
    session: AsyncSession,
    *,
    medication: Medication,
    payload: ScheduleCreate,
    tz: ZoneInfo,
) -> ScheduleRule:
    """Attach a new schedule built from its type tag to ``medication``."""
    schedule_type = resolve_schedule_type(payload.schedule_type)
    rule = create_rule(schedule_type, medication.id)
    rule = replace(rule, **_coerce_updates(schedule_type, payload, tz=tz))
    schedule = ScheduleRule.from_rule(rule)
    session.add(schedule)
    await session.commit()
    await session.refresh(schedule)
    logger.info(
        "Added %s schedule %s to medication %s", schedule_type.value, schedule.id, medication.id
    )
    evaluable_rule(schedule)
    return schedule


async def update_schedule(
    session: AsyncSession,
    *,
    schedule: ScheduleRule,
    payload: ScheduleUpdate,
    tz: ZoneInfo,
) -> ScheduleRule:
    schedule_type = resolve_schedule_type(schedule.schedule_type)
    rule = replace(schedule.as_rule(), **_coerce_updates(schedule_type, payload, tz=tz))
    schedule.apply_rule(rule)
    await session.commit()
    await session.refresh(schedule)
    evaluable_rule(schedule)
    return schedule


async def soft_delete_schedule(session: AsyncSession, *, schedule: ScheduleRule) -> None:
    """Detach a schedule from its medication, keeping the row."""
    schedule.soft_delete()
    await session.commit()


async def record_dose(
    session: AsyncSession, *, schedule: ScheduleRule, taken_at: datetime
) -> ScheduleRule:
    """Note a dose on an as-needed schedule; ``taken_at`` is wall-clock time."""
    if not isinstance(schedule, AsNeededSchedule):
        raise ValueError("Doses can only be recorded on as-needed schedules")
    rule: AsNeededRule = schedule.as_rule()
    schedule.apply_rule(rule.record_dose(taken_at))
    await session.commit()
    await session.refresh(schedule)
    return schedule


def evaluate(schedule: ScheduleRule, at: datetime) -> tuple[bool, datetime | None]:
    """Return whether ``schedule`` is due at ``at`` and its next dose from then."""
    rule = evaluable_rule(schedule)
    return rule.is_due_at(at), rule.next_dose(at)
