"""Medication schedule API endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fmms.api import deps
from fmms.api.v1.medications import get_medication_or_404
from fmms.models.schedule_rule import ScheduleRule
from fmms.models.user import User
from fmms.schemas.schedule import (
    DoseRecordRequest,
    ScheduleCreate,
    ScheduleEvaluation,
    ScheduleRead,
    ScheduleUpdate,
)
from fmms.services import schedule_service

router = APIRouter()

_PREFIX = "/medications/{medication_id}/schedules"


async def _get_schedule_or_404(
    session: AsyncSession, user: User, medication_id: int, schedule_id: int
) -> ScheduleRule:
    await get_medication_or_404(session, user, medication_id)
    schedule = await schedule_service.get_schedule(
        session, medication_id=medication_id, schedule_id=schedule_id
    )
    if schedule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    return schedule


@router.get("/schedules/active", response_model=list[ScheduleRead], summary="Active schedules")
async def list_active_schedules(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[ScheduleRead]:
    """Return every active schedule in the household."""
    schedules = await schedule_service.list_active_schedules(
        session, household_id=current_user.household_id
    )
    now = deps.household_now(current_user)
    return [ScheduleRead.from_model(schedule, now=now) for schedule in schedules]


@router.get(_PREFIX, response_model=list[ScheduleRead], summary="List schedules")
async def list_schedules(
    medication_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[ScheduleRead]:
    await get_medication_or_404(session, current_user, medication_id)
    schedules = await schedule_service.list_schedules(session, medication_id=medication_id)
    now = deps.household_now(current_user)
    return [ScheduleRead.from_model(schedule, now=now) for schedule in schedules]


@router.post(
    _PREFIX,
    response_model=ScheduleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create schedule",
)
async def create_schedule(
    medication_id: int,
    payload: ScheduleCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> ScheduleRead:
    medication = await get_medication_or_404(session, current_user, medication_id)
    try:
        schedule = await schedule_service.create_schedule(
            session,
            medication=medication,
            payload=payload,
            tz=deps.household_timezone(current_user),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ScheduleRead.from_model(schedule, now=deps.household_now(current_user))


@router.get(_PREFIX + "/{schedule_id}", response_model=ScheduleRead, summary="Get schedule")
async def get_schedule(
    medication_id: int,
    schedule_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> ScheduleRead:
    schedule = await _get_schedule_or_404(session, current_user, medication_id, schedule_id)
    return ScheduleRead.from_model(schedule, now=deps.household_now(current_user))


@router.patch(
    _PREFIX + "/{schedule_id}", response_model=ScheduleRead, summary="Update schedule"
)
async def update_schedule(
    medication_id: int,
    schedule_id: int,
    payload: ScheduleUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> ScheduleRead:
    schedule = await _get_schedule_or_404(session, current_user, medication_id, schedule_id)
    try:
        schedule = await schedule_service.update_schedule(
            session,
            schedule=schedule,
            payload=payload,
            tz=deps.household_timezone(current_user),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ScheduleRead.from_model(schedule, now=deps.household_now(current_user))


@router.delete(
    _PREFIX + "/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Detach schedule",
)
async def delete_schedule(
    medication_id: int,
    schedule_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> None:
    schedule = await _get_schedule_or_404(session, current_user, medication_id, schedule_id)
    await schedule_service.soft_delete_schedule(session, schedule=schedule)


@router.post(
    _PREFIX + "/{schedule_id}/doses",
    response_model=ScheduleRead,
    summary="Record an as-needed dose",
)
async def record_dose(
    medication_id: int,
    schedule_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    payload: DoseRecordRequest | None = None,
) -> ScheduleRead:
    schedule = await _get_schedule_or_404(session, current_user, medication_id, schedule_id)
    taken_at = deps.household_time(current_user, payload.taken_at if payload else None)
    try:
        schedule = await schedule_service.record_dose(
            session, schedule=schedule, taken_at=taken_at
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ScheduleRead.from_model(schedule, now=deps.household_now(current_user))


async def _evaluate(
    session: AsyncSession,
    user: User,
    medication_id: int,
    schedule_id: int,
    at: datetime | None,
) -> ScheduleEvaluation:
    schedule = await _get_schedule_or_404(session, user, medication_id, schedule_id)
    moment = deps.household_time(user, at)
    is_due, next_dose_at = schedule_service.evaluate(schedule, moment)
    return ScheduleEvaluation(
        schedule_id=schedule.id,
        at=moment,
        is_due=is_due,
        next_dose_at=next_dose_at,
        description=schedule.as_rule().describe(),
    )


@router.get(
    _PREFIX + "/{schedule_id}/next-dose",
    response_model=ScheduleEvaluation,
    summary="Next dose after a moment",
)
async def next_dose(
    medication_id: int,
    schedule_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    at: datetime | None = Query(default=None),
) -> ScheduleEvaluation:
    return await _evaluate(session, current_user, medication_id, schedule_id, at)


@router.get(
    _PREFIX + "/{schedule_id}/due",
    response_model=ScheduleEvaluation,
    summary="Whether a dose is due",
)
async def is_due(
    medication_id: int,
    schedule_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    at: datetime | None = Query(default=None),
) -> ScheduleEvaluation:
    return await _evaluate(session, current_user, medication_id, schedule_id, at)
