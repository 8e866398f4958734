"""Family member service helpers."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from fmms.models.person import Person
from fmms.schemas.person import PersonCreate, PersonUpdate


def _base_person_query(
    household_id: int, *, include_deleted: bool = False
) -> Select[tuple[Person]]:
    """Return a base query for people scoped to a household."""
    stmt = (
        select(Person)
        .where(Person.household_id == household_id)
        .order_by(Person.last_name, Person.first_name)
    )
    if not include_deleted:
        stmt = stmt.where(Person.is_deleted.is_(False))
    return stmt


async def list_people(
    session: AsyncSession,
    *,
    household_id: int,
    search: str | None = None,
    include_deleted: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[Person]:
    """Return people ordered by last then first name."""
    stmt = _base_person_query(household_id, include_deleted=include_deleted)
    term = (search or "").strip().lower()
    if term:
        pattern = f"%{term}%"
        stmt = stmt.where(
            or_(
                func.lower(Person.first_name).like(pattern),
                func.lower(Person.last_name).like(pattern),
                func.lower(Person.first_name + " " + Person.last_name).like(pattern),
            )
        )
    stmt = stmt.offset(skip).limit(limit)
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_person(
    session: AsyncSession,
    *,
    household_id: int,
    person_id: int,
    include_deleted: bool = False,
) -> Person | None:
    """Return a single person scoped to the household."""
    stmt = _base_person_query(household_id, include_deleted=include_deleted).where(
        Person.id == person_id
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_person(
    session: AsyncSession, *, household_id: int, payload: PersonCreate
) -> Person:
    person = Person(
        household_id=household_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        date_of_birth=payload.date_of_birth,
    )
    session.add(person)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    await session.refresh(person)
    return person


async def update_person(
    session: AsyncSession, *, person: Person, payload: PersonUpdate
) -> Person:
    updates = payload.model_dump(exclude_unset=True)
    for field in ("first_name", "last_name"):
        if field in updates and updates[field] is None:
            raise ValueError(f"{field.replace('_', ' ').capitalize()} is required")
    for field, value in updates.items():
        setattr(person, field, value)
    person.mark_updated()
    await session.commit()
    await session.refresh(person)
    return person


async def soft_delete_person(session: AsyncSession, *, person: Person) -> None:
    """Flag the person as deleted, keeping their history."""
    person.soft_delete()
    await session.commit()


async def delete_person(session: AsyncSession, *, person: Person) -> None:
    """Remove the person together with their medications and schedules."""
    await session.refresh(person, attribute_names=["medications"])
    for medication in person.medications:
        await session.refresh(medication, attribute_names=["schedules"])
    await session.delete(person)
    await session.commit()
