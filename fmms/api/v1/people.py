"""Family member API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fmms.api import deps
from fmms.models.person import Person
from fmms.models.user import User
from fmms.schemas.medication import MedicationRead
from fmms.schemas.person import PersonCreate, PersonRead, PersonUpdate
from fmms.services import medication_service, person_service

router = APIRouter()


async def _get_person_or_404(
    session: AsyncSession, user: User, person_id: int
) -> Person:
    person = await person_service.get_person(
        session, household_id=user.household_id, person_id=person_id
    )
    if person is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Person not found")
    return person


@router.get("", response_model=list[PersonRead], summary="List people")
async def list_people(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    q: str | None = Query(default=None),
    include_deleted: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> list[PersonRead]:
    """Return the household's family members ordered by name."""
    people = await person_service.list_people(
        session,
        household_id=current_user.household_id,
        search=q,
        include_deleted=include_deleted,
        skip=skip,
        limit=min(limit, 500),
    )
    return [PersonRead.model_validate(person) for person in people]


@router.post(
    "",
    response_model=PersonRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create person",
)
async def create_person(
    payload: PersonCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> PersonRead:
    person = await person_service.create_person(
        session, household_id=current_user.household_id, payload=payload
    )
    return PersonRead.model_validate(person)


@router.get("/{person_id}", response_model=PersonRead, summary="Get person")
async def get_person(
    person_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> PersonRead:
    person = await _get_person_or_404(session, current_user, person_id)
    return PersonRead.model_validate(person)


@router.patch("/{person_id}", response_model=PersonRead, summary="Update person")
async def update_person(
    person_id: int,
    payload: PersonUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> PersonRead:
    person = await _get_person_or_404(session, current_user, person_id)
    try:
        person = await person_service.update_person(session, person=person, payload=payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return PersonRead.model_validate(person)


@router.delete(
    "/{person_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete person"
)
async def delete_person(
    person_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    hard: bool = False,
) -> None:
    """Remove a person; by default the record is only flagged as deleted."""
    person = await _get_person_or_404(session, current_user, person_id)
    if hard:
        await person_service.delete_person(session, person=person)
    else:
        await person_service.soft_delete_person(session, person=person)


@router.get(
    "/{person_id}/medications",
    response_model=list[MedicationRead],
    summary="List a person's medications",
)
async def list_person_medications(
    person_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    active_only: bool = False,
) -> list[MedicationRead]:
    await _get_person_or_404(session, current_user, person_id)
    medications = await medication_service.list_medications(
        session,
        household_id=current_user.household_id,
        person_id=person_id,
        active_only=active_only,
    )
    today = deps.household_now(current_user).date()
    return [MedicationRead.from_model(m, today=today) for m in medications]
