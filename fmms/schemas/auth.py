"""Authentication schemas."""
from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from fmms.schemas.user import HouseholdRead, UserRead


class Token(BaseModel):
    """Response body for access tokens."""

    access_token: str
    token_type: str = "bearer"


class RegistrationRequest(BaseModel):
    """Create a household together with its first caregiver."""

    household_name: str = Field(min_length=1, max_length=255)
    timezone: str | None = None
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class RegistrationResponse(BaseModel):
    """Response after successful registration."""

    token: Token
    user: UserRead
    household: HouseholdRead
