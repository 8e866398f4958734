"""Reporting endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fmms.api import deps
from fmms.models.user import User
from fmms.schemas.reporting import (
    DashboardSummary,
    MedicationSummaryReport,
    PeopleSummaryReport,
)
from fmms.services import reporting_service

router = APIRouter()


@router.get("/dashboard", response_model=DashboardSummary, summary="Dashboard counts")
async def dashboard(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> DashboardSummary:
    data = await reporting_service.dashboard_summary(
        session,
        household_id=current_user.household_id,
        today=deps.household_now(current_user).date(),
    )
    return DashboardSummary.model_validate(data)


@router.get(
    "/medications",
    response_model=MedicationSummaryReport,
    summary="Medication summary report",
)
async def medication_summary(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> MedicationSummaryReport:
    data = await reporting_service.medication_summary(
        session,
        household_id=current_user.household_id,
        today=deps.household_now(current_user).date(),
    )
    return MedicationSummaryReport.model_validate(data)


@router.get("/people", response_model=PeopleSummaryReport, summary="People summary report")
async def people_summary(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> PeopleSummaryReport:
    data = await reporting_service.people_summary(
        session, household_id=current_user.household_id
    )
    return PeopleSummaryReport.model_validate(data)
