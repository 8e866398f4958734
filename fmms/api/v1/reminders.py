"""Reminder endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fmms.api import deps
from fmms.core.config import get_settings
from fmms.models.user import User
from fmms.schemas.reminder import Reminder, UpcomingDose
from fmms.services import reminder_service

router = APIRouter()


@router.get("/due", response_model=list[Reminder], summary="Doses due now")
async def due_reminders(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    at: datetime | None = Query(default=None),
) -> list[Reminder]:
    """Return reminders for scheduled doses due at ``at`` (default: now)."""
    items = await reminder_service.due_reminders(
        session,
        household_id=current_user.household_id,
        at=deps.household_time(current_user, at),
    )
    return [Reminder.model_validate(item) for item in items]


@router.get("/upcoming", response_model=list[UpcomingDose], summary="Upcoming doses")
async def upcoming_doses(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    at: datetime | None = Query(default=None),
    hours: int | None = Query(default=None, ge=1, le=24 * 14),
) -> list[UpcomingDose]:
    """Return scheduled doses within the next ``hours`` (default from settings)."""
    horizon = hours or get_settings().reminder_horizon_hours
    items = await reminder_service.upcoming_doses(
        session,
        household_id=current_user.household_id,
        now=deps.household_time(current_user, at),
        horizon=timedelta(hours=horizon),
    )
    return [UpcomingDose.model_validate(item) for item in items]
