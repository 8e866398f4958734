"""Search endpoints."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fmms.api import deps
from fmms.models.user import User
from fmms.schemas.search import SearchResult
from fmms.services import search_service

router = APIRouter()


@router.get("", response_model=list[SearchResult], summary="Search everything")
async def search_all(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    q: str = Query(default=""),
) -> list[SearchResult]:
    """Search people, medications and active schedules."""
    return await search_service.search_all(
        session, household_id=current_user.household_id, term=q
    )


@router.get("/by-date", response_model=list[SearchResult], summary="Search by date range")
async def search_by_date(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
) -> list[SearchResult]:
    if start is not None and end is not None and start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must be on or before end",
        )
    return await search_service.search_by_date(
        session, household_id=current_user.household_id, start=start, end=end
    )


@router.get(
    "/medications", response_model=list[SearchResult], summary="Advanced medication search"
)
async def search_medications(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    name: str | None = Query(default=None),
    dosage: str | None = Query(default=None),
    prescriber: str | None = Query(default=None),
    person_id: int | None = Query(default=None),
    is_active: bool | None = Query(default=None),
) -> list[SearchResult]:
    return await search_service.search_medications(
        session,
        household_id=current_user.household_id,
        name=name,
        dosage=dosage,
        prescriber=prescriber,
        person_id=person_id,
        is_active=is_active,
    )
