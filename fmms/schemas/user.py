"""User and household schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from fmms.models.user import UserStatus


class HouseholdRead(BaseModel):
    id: int
    name: str
    slug: str
    timezone: str

    model_config = ConfigDict(from_attributes=True)


class UserRead(BaseModel):
    """Serialized caregiver."""

    id: int
    household_id: int
    email: str
    first_name: str
    last_name: str
    status: UserStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
