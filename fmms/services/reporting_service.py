"""Reporting services."""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fmms.models.medication import Medication
from fmms.services import medication_service, person_service

_REPORT_LIMIT = 10_000


async def dashboard_summary(
    session: AsyncSession, *, household_id: int, today: date
) -> dict[str, Any]:
    """Return headline counts for the household."""
    people = await person_service.list_people(
        session, household_id=household_id, limit=_REPORT_LIMIT
    )
    medications = await medication_service.list_medications(
        session, household_id=household_id, limit=_REPORT_LIMIT
    )
    low_supply = sorted(
        (m for m in medications if m.is_supply_low()),
        key=lambda m: (m.current_supply, m.name),
    )
    return {
        "total_people": len(people),
        "total_medications": len(medications),
        "active_medications": sum(1 for m in medications if m.is_active),
        "low_supply_count": len(low_supply),
        "needs_refill_count": sum(1 for m in medications if m.needs_refill()),
        "expired_count": sum(1 for m in medications if m.is_expired(today)),
        "low_supply": [
            {
                "medication_id": m.id,
                "name": m.name,
                "person_name": m.person.display_name,
                "current_supply": m.current_supply,
                "low_supply_threshold": m.low_supply_threshold,
                "refills_remaining": m.refills_remaining,
            }
            for m in low_supply
        ],
    }


async def medication_summary(
    session: AsyncSession, *, household_id: int, today: date
) -> dict[str, Any]:
    """Every medication grouped by person, with totals."""
    people = await person_service.list_people(
        session, household_id=household_id, limit=_REPORT_LIMIT
    )
    medications = await medication_service.list_medications(
        session, household_id=household_id, limit=_REPORT_LIMIT
    )
    by_person: dict[int, list[Medication]] = defaultdict(list)
    for medication in medications:
        by_person[medication.person_id].append(medication)

    rows: list[dict[str, Any]] = []
    for person in people:
        for medication in by_person.get(person.id, []):
            rows.append(
                {
                    "person_id": person.id,
                    "person_name": person.display_name,
                    "medication_id": medication.id,
                    "medication_name": medication.name,
                    "dosage": medication.dosage,
                    "current_supply": medication.current_supply,
                    "low_supply_threshold": medication.low_supply_threshold,
                    "refills_remaining": medication.refills_remaining,
                    "is_active": medication.is_active,
                    "is_supply_low": medication.is_supply_low(),
                    "is_expired": medication.is_expired(today),
                    "pharmacy": medication.pharmacy,
                }
            )

    return {
        "generated_at": datetime.now(UTC),
        "as_of": today,
        "rows": rows,
        "statistics": {
            "total_people": len(people),
            "total_medications": len(medications),
            "active_medications": sum(1 for m in medications if m.is_active),
            "low_supply_medications": sum(1 for m in medications if m.is_supply_low()),
            "expired_medications": sum(1 for m in medications if m.is_expired(today)),
            "medications_needing_refill": sum(1 for m in medications if m.needs_refill()),
        },
    }


async def people_summary(session: AsyncSession, *, household_id: int) -> dict[str, Any]:
    """All people, removed ones included."""
    people = await person_service.list_people(
        session, household_id=household_id, include_deleted=True, limit=_REPORT_LIMIT
    )
    rows = [
        {
            "id": person.id,
            "first_name": person.first_name,
            "last_name": person.last_name,
            "created_at": person.created_at,
            "updated_at": person.updated_at,
            "is_deleted": person.is_deleted,
        }
        for person in people
    ]
    return {"generated_at": datetime.now(UTC), "rows": rows}
