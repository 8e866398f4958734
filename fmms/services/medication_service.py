"""Medication services: records, supply tracking and dose actions."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from fmms.models.medication import Medication
from fmms.models.person import Person
from fmms.models.schedule_rule import AsNeededSchedule, DailySchedule, ScheduleRule
from fmms.scheduling import DailyRule
from fmms.schemas.medication import MedicationCreate, MedicationUpdate

logger = logging.getLogger(__name__)


def _base_medication_query(
    household_id: int, *, include_deleted: bool = False
) -> Select[tuple[Medication]]:
    """Return a base query for medications scoped to a household."""
    stmt = (
        select(Medication)
        .join(Medication.person)
        .options(selectinload(Medication.person))
        .where(Person.household_id == household_id)
        .order_by(Medication.name)
    )
    if not include_deleted:
        stmt = stmt.where(Medication.is_deleted.is_(False))
    return stmt


async def _ensure_person(
    session: AsyncSession, *, household_id: int, person_id: int
) -> Person:
    person = await session.get(Person, person_id)
    if person is None or person.household_id != household_id or person.is_deleted:
        raise ValueError("Person not found for household")
    return person


def _validate(medication: Medication, today: date) -> None:
    problem = medication.validation_error(today)
    if problem is not None:
        raise ValueError(problem)


async def list_medications(
    session: AsyncSession,
    *,
    household_id: int,
    person_id: int | None = None,
    search: str | None = None,
    include_deleted: bool = False,
    active_only: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[Medication]:
    """Return medications ordered by name."""
    stmt = _base_medication_query(household_id, include_deleted=include_deleted)
    if person_id is not None:
        stmt = stmt.where(Medication.person_id == person_id)
    if active_only:
        stmt = stmt.where(Medication.is_active.is_(True))
    term = (search or "").strip().lower()
    if term:
        pattern = f"%{term}%"
        stmt = stmt.where(
            or_(
                func.lower(Medication.name).like(pattern),
                func.lower(Medication.dosage).like(pattern),
                func.lower(Medication.prescribing_doctor).like(pattern),
                func.lower(Medication.instructions).like(pattern),
            )
        )
    stmt = stmt.offset(skip).limit(limit)
    result = await session.execute(stmt)
    return result.scalars().unique().all()


async def find_medications(
    session: AsyncSession,
    *,
    household_id: int,
    name: str | None = None,
    dosage: str | None = None,
    prescriber: str | None = None,
    person_id: int | None = None,
    is_active: bool | None = None,
    dated_from: date | None = None,
    dated_until: date | None = None,
) -> Sequence[Medication]:
    """Medications matching every supplied criterion, ordered by name.

    Text criteria are case-insensitive substrings. A date bound matches when
    either the prescription or the expiration date falls on its side of it.
    """
    stmt = _base_medication_query(household_id)
    if person_id is not None:
        stmt = stmt.where(Medication.person_id == person_id)
    if is_active is not None:
        stmt = stmt.where(Medication.is_active.is_(is_active))
    for column, needle in (
        (Medication.name, name),
        (Medication.dosage, dosage),
        (Medication.prescribing_doctor, prescriber),
    ):
        if needle and needle.strip():
            stmt = stmt.where(
                func.lower(column).contains(needle.strip().lower(), autoescape=True)
            )
    if dated_from is not None:
        stmt = stmt.where(
            or_(
                Medication.prescription_date >= dated_from,
                Medication.expiration_date >= dated_from,
            )
        )
    if dated_until is not None:
        stmt = stmt.where(
            or_(
                Medication.prescription_date <= dated_until,
                Medication.expiration_date <= dated_until,
            )
        )
    result = await session.execute(stmt)
    return result.scalars().unique().all()


async def get_medication(
    session: AsyncSession,
    *,
    household_id: int,
    medication_id: int,
    include_deleted: bool = False,
) -> Medication | None:
    """Return a single medication scoped to the household."""
    stmt = _base_medication_query(household_id, include_deleted=include_deleted).where(
        Medication.id == medication_id
    )
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()


async def list_low_supply(
    session: AsyncSession, *, household_id: int, person_id: int | None = None
) -> Sequence[Medication]:
    """Medications with some supply left at or below their threshold."""
    stmt = (
        _base_medication_query(household_id)
        .where(
            Medication.current_supply > 0,
            Medication.current_supply <= Medication.low_supply_threshold,
        )
        .order_by(None)
        .order_by(Medication.current_supply, Medication.name)
    )
    if person_id is not None:
        stmt = stmt.where(Medication.person_id == person_id)
    result = await session.execute(stmt)
    return result.scalars().unique().all()


async def list_expired(
    session: AsyncSession,
    *,
    household_id: int,
    today: date,
    person_id: int | None = None,
) -> Sequence[Medication]:
    """Medications whose expiration date has passed."""
    stmt = (
        _base_medication_query(household_id)
        .where(Medication.expiration_date.is_not(None), Medication.expiration_date < today)
        .order_by(None)
        .order_by(Medication.expiration_date, Medication.name)
    )
    if person_id is not None:
        stmt = stmt.where(Medication.person_id == person_id)
    result = await session.execute(stmt)
    return result.scalars().unique().all()


async def create_medication(
    session: AsyncSession,
    *,
    household_id: int,
    payload: MedicationCreate,
    today: date,
) -> Medication:
    await _ensure_person(session, household_id=household_id, person_id=payload.person_id)
    medication = Medication(**payload.model_dump())
    _validate(medication, today)
    session.add(medication)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    logger.info("Created medication %s for person %s", medication.id, medication.person_id)
    return await _reload(session, medication)


async def update_medication(
    session: AsyncSession,
    *,
    household_id: int,
    medication: Medication,
    payload: MedicationUpdate,
    today: date,
) -> Medication:
    updates = payload.model_dump(exclude_unset=True)
    if "name" in updates and updates["name"] is None:
        raise ValueError("Medication name is required")
    if updates.get("person_id") is not None:
        await _ensure_person(
            session, household_id=household_id, person_id=updates["person_id"]
        )
    for field, value in updates.items():
        if value is None and field not in ("prescription_date", "expiration_date", "notes"):
            continue
        setattr(medication, field, value)
    try:
        _validate(medication, today)
    except ValueError:
        await session.rollback()
        raise
    medication.mark_updated()
    await session.commit()
    return await _reload(session, medication)


async def soft_delete_medication(session: AsyncSession, *, medication: Medication) -> None:
    medication.soft_delete()
    await session.commit()


async def delete_medication(session: AsyncSession, *, medication: Medication) -> None:
    await session.refresh(medication, attribute_names=["schedules"])
    await session.delete(medication)
    await session.commit()


async def take_dose(
    session: AsyncSession, *, medication: Medication, taken_at: datetime
) -> Medication:
    """Deduct one dose from the supply and note it on as-needed schedules.

    ``taken_at`` is household wall-clock time.
    """
    if medication.is_out_of_stock():
        raise ValueError(f"{medication.name} is out of stock")
    medication.take_dose(medication.pills_per_dose)
    result = await session.execute(
        select(AsNeededSchedule).where(
            AsNeededSchedule.medication_id == medication.id,
            AsNeededSchedule.is_active.is_(True),
            AsNeededSchedule.is_deleted.is_(False),
        )
    )
    for schedule in result.scalars().all():
        schedule.apply_rule(schedule.as_rule().record_dose(taken_at))
    await session.commit()
    if medication.is_supply_low():
        logger.info(
            "Medication %s is running low (%s left)", medication.id, medication.current_supply
        )
    return await _reload(session, medication)


async def refill(session: AsyncSession, *, medication: Medication, count: int) -> Medication:
    """Add a refill to the supply, consuming one authorised refill."""
    if medication.refills_remaining <= 0:
        raise ValueError(f"No refills remaining for {medication.name}")
    medication.record_refill(count)
    await session.commit()
    return await _reload(session, medication)


async def set_daily_times(
    session: AsyncSession, *, medication: Medication, times_of_day: list[int]
) -> DailySchedule | None:
    """Replace the daily dose times of a medication.

    Updates the existing daily schedule or creates one; an empty list removes
    the schedule.
    """
    result = await session.execute(
        select(DailySchedule)
        .where(
            DailySchedule.medication_id == medication.id,
            DailySchedule.is_deleted.is_(False),
        )
        .order_by(DailySchedule.created_at)
        .limit(1)
    )
    schedule = result.scalar_one_or_none()
    if not times_of_day:
        if schedule is not None:
            schedule.soft_delete()
            await session.commit()
        return None

    if schedule is None:
        rule = DailyRule(medication_id=medication.id, times_of_day=tuple(times_of_day))
        schedule = ScheduleRule.from_rule(rule)
        session.add(schedule)
    else:
        current = schedule.as_rule()
        schedule.apply_rule(
            DailyRule(
                medication_id=medication.id,
                times_of_day=tuple(times_of_day),
                is_active=current.is_active,
                notes=current.notes,
            )
        )
    await session.commit()
    await session.refresh(schedule)
    return schedule


async def _reload(session: AsyncSession, medication: Medication) -> Medication:
    await session.refresh(medication)
    await session.refresh(medication, attribute_names=["person"])
    return medication
