"""Search across people, medications and schedules."""

from __future__ import annotations

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from fmms.models.medication import Medication
from fmms.models.person import Person
from fmms.schemas.search import SearchResult
from fmms.services import medication_service, person_service, schedule_service

_SEARCH_LIMIT = 500


def _person_result(person: Person) -> SearchResult:
    subtitle = (
        f"DOB: {person.date_of_birth.isoformat()}"
        if person.date_of_birth is not None
        else "Family Member"
    )
    return SearchResult(
        entity_type="Person",
        entity_id=person.id,
        title=person.display_name,
        subtitle=subtitle,
        details=f"ID: {person.id}",
        timestamp=person.updated_at,
    )


def _medication_result(medication: Medication, details: str) -> SearchResult:
    return SearchResult(
        entity_type="Medication",
        entity_id=medication.id,
        title=medication.name,
        subtitle=medication.dosage or "Medication",
        details=details,
        person_id=medication.person_id,
        timestamp=medication.updated_at,
    )


def _supply_details(medication: Medication) -> str:
    return (
        f"Supply: {medication.current_supply} doses | "
        f"Prescribed by: {medication.prescribing_doctor}"
    )


async def search_all(
    session: AsyncSession, *, household_id: int, term: str
) -> list[SearchResult]:
    """Match ``term`` against people, medications and active schedules.

    Results are ordered by entity type, then title. A blank term matches
    nothing.
    """
    needle = (term or "").strip()
    if not needle:
        return []

    results: list[SearchResult] = []
    people = await person_service.list_people(
        session, household_id=household_id, search=needle, limit=_SEARCH_LIMIT
    )
    results.extend(_person_result(person) for person in people)

    medications = await medication_service.list_medications(
        session, household_id=household_id, search=needle, limit=_SEARCH_LIMIT
    )
    results.extend(_medication_result(m, _supply_details(m)) for m in medications)

    results.extend(await _search_schedules(session, household_id=household_id, term=needle))
    return sorted(results, key=lambda result: (result.entity_type, result.title))


async def _search_schedules(
    session: AsyncSession, *, household_id: int, term: str
) -> list[SearchResult]:
    needle = term.lower()
    results = []
    for schedule in await schedule_service.list_active_schedules(
        session, household_id=household_id
    ):
        description = schedule.as_rule().describe()
        haystacks = (schedule.schedule_type, description, schedule.notes or "")
        if not any(needle in text.lower() for text in haystacks):
            continue
        results.append(
            SearchResult(
                entity_type=f"Schedule ({schedule.schedule_type})",
                entity_id=schedule.id,
                title=description,
                subtitle=f"Medication: {schedule.medication.name}",
                details=(
                    f"Type: {schedule.schedule_type} | "
                    f"Active: {'Yes' if schedule.is_active else 'No'}"
                ),
                person_id=schedule.medication.person_id,
                timestamp=schedule.updated_at,
            )
        )
    return results


async def search_by_date(
    session: AsyncSession,
    *,
    household_id: int,
    start: date | None = None,
    end: date | None = None,
) -> list[SearchResult]:
    """Medications prescribed or expiring within the given range.

    Either bound may be open; with neither bound nothing matches.
    """
    if start is None and end is None:
        return []

    medications = await medication_service.find_medications(
        session, household_id=household_id, dated_from=start, dated_until=end
    )
    matches = sorted(medications, key=lambda m: m.prescription_date or m.updated_at.date())
    return [
        _medication_result(
            m,
            f"Prescribed: {m.prescription_date or ''} | Expires: {m.expiration_date or ''}",
        )
        for m in matches
    ]


async def search_medications(
    session: AsyncSession,
    *,
    household_id: int,
    name: str | None = None,
    dosage: str | None = None,
    prescriber: str | None = None,
    person_id: int | None = None,
    is_active: bool | None = None,
) -> list[SearchResult]:
    """Medications matching every supplied criterion, ordered by name."""
    medications = await medication_service.find_medications(
        session,
        household_id=household_id,
        name=name,
        dosage=dosage,
        prescriber=prescriber,
        person_id=person_id,
        is_active=is_active,
    )
    return [
        _medication_result(
            m,
            f"Supply: {m.current_supply} | Prescribed by: {m.prescribing_doctor} | "
            f"Active: {'Yes' if m.is_active else 'No'}",
        )
        for m in medications
    ]
