"""Caregiver account endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from fmms.api import deps
from fmms.models.user import User
from fmms.schemas.user import HouseholdRead, UserRead

router = APIRouter()


@router.get("/me", response_model=UserRead, summary="Current caregiver")
async def read_current_user(
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> UserRead:
    return UserRead.model_validate(current_user)


@router.get("/me/household", response_model=HouseholdRead, summary="Current household")
async def read_current_household(
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> HouseholdRead:
    return HouseholdRead.model_validate(current_user.household)
