"""Medication API: records, supply status and dose actions."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fmms.api import deps
from fmms.models.medication import Medication
from fmms.models.user import User
from fmms.schemas.medication import (
    DailyTimesUpdate,
    MedicationCreate,
    MedicationRead,
    MedicationUpdate,
    RefillRequest,
    TakeDoseRequest,
)
from fmms.schemas.schedule import ScheduleRead
from fmms.services import medication_service

router = APIRouter()


async def get_medication_or_404(
    session: AsyncSession, user: User, medication_id: int
) -> Medication:
    medication = await medication_service.get_medication(
        session, household_id=user.household_id, medication_id=medication_id
    )
    if medication is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Medication not found"
        )
    return medication


def _read(medication: Medication, user: User) -> MedicationRead:
    return MedicationRead.from_model(medication, today=deps.household_now(user).date())


@router.get("", response_model=list[MedicationRead], summary="List medications")
async def list_medications(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    person_id: int | None = Query(default=None),
    q: str | None = Query(default=None),
    include_deleted: bool = False,
    active_only: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> list[MedicationRead]:
    """Return medications ordered by name."""
    medications = await medication_service.list_medications(
        session,
        household_id=current_user.household_id,
        person_id=person_id,
        search=q,
        include_deleted=include_deleted,
        active_only=active_only,
        skip=skip,
        limit=min(limit, 500),
    )
    return [_read(m, current_user) for m in medications]


@router.get(
    "/low-supply", response_model=list[MedicationRead], summary="Low supply medications"
)
async def list_low_supply(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    person_id: int | None = Query(default=None),
) -> list[MedicationRead]:
    medications = await medication_service.list_low_supply(
        session, household_id=current_user.household_id, person_id=person_id
    )
    return [_read(m, current_user) for m in medications]


@router.get("/expired", response_model=list[MedicationRead], summary="Expired medications")
async def list_expired(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    person_id: int | None = Query(default=None),
) -> list[MedicationRead]:
    medications = await medication_service.list_expired(
        session,
        household_id=current_user.household_id,
        today=deps.household_now(current_user).date(),
        person_id=person_id,
    )
    return [_read(m, current_user) for m in medications]


@router.post(
    "",
    response_model=MedicationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create medication",
)
async def create_medication(
    payload: MedicationCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> MedicationRead:
    try:
        medication = await medication_service.create_medication(
            session,
            household_id=current_user.household_id,
            payload=payload,
            today=deps.household_now(current_user).date(),
        )
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Unable to create medication"
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _read(medication, current_user)


@router.get("/{medication_id}", response_model=MedicationRead, summary="Get medication")
async def get_medication(
    medication_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> MedicationRead:
    medication = await get_medication_or_404(session, current_user, medication_id)
    return _read(medication, current_user)


@router.patch(
    "/{medication_id}", response_model=MedicationRead, summary="Update medication"
)
async def update_medication(
    medication_id: int,
    payload: MedicationUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> MedicationRead:
    medication = await get_medication_or_404(session, current_user, medication_id)
    try:
        medication = await medication_service.update_medication(
            session,
            household_id=current_user.household_id,
            medication=medication,
            payload=payload,
            today=deps.household_now(current_user).date(),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _read(medication, current_user)


@router.delete(
    "/{medication_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete medication",
)
async def delete_medication(
    medication_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    hard: bool = False,
) -> None:
    """Remove a medication; by default the record is only flagged as deleted."""
    medication = await get_medication_or_404(session, current_user, medication_id)
    if hard:
        await medication_service.delete_medication(session, medication=medication)
    else:
        await medication_service.soft_delete_medication(session, medication=medication)


@router.post(
    "/{medication_id}/take-dose", response_model=MedicationRead, summary="Take a dose"
)
async def take_dose(
    medication_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    payload: TakeDoseRequest | None = None,
) -> MedicationRead:
    """Deduct one dose (``pills_per_dose`` units) from the supply."""
    medication = await get_medication_or_404(session, current_user, medication_id)
    taken_at = deps.household_time(current_user, payload.taken_at if payload else None)
    try:
        medication = await medication_service.take_dose(
            session, medication=medication, taken_at=taken_at
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _read(medication, current_user)


@router.post("/{medication_id}/refill", response_model=MedicationRead, summary="Refill")
async def refill_medication(
    medication_id: int,
    payload: RefillRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> MedicationRead:
    medication = await get_medication_or_404(session, current_user, medication_id)
    try:
        medication = await medication_service.refill(
            session, medication=medication, count=payload.count
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _read(medication, current_user)


@router.put(
    "/{medication_id}/daily-times",
    response_model=ScheduleRead | None,
    summary="Replace daily dose times",
)
async def replace_daily_times(
    medication_id: int,
    payload: DailyTimesUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> ScheduleRead | None:
    """Set the medication's daily times; an empty list removes its daily schedule."""
    medication = await get_medication_or_404(session, current_user, medication_id)
    schedule = await medication_service.set_daily_times(
        session, medication=medication, times_of_day=payload.cleaned()
    )
    if schedule is None:
        return None
    return ScheduleRead.from_model(schedule, now=deps.household_now(current_user))
