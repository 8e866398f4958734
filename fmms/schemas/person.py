"""Person schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _BirthDateMixin(BaseModel):
    @field_validator("date_of_birth", check_fields=False)
    @classmethod
    def _not_in_future(cls, value: date | None) -> date | None:
        if value is not None and value > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return value


class PersonBase(_BirthDateMixin):
    """Shared person fields."""

    first_name: str = Field(min_length=1, max_length=200)
    last_name: str = Field(min_length=1, max_length=200)
    date_of_birth: date | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class PersonCreate(PersonBase):
    """Payload for creating a person."""


class PersonUpdate(_BirthDateMixin):
    """Mutable person fields."""

    first_name: str | None = Field(default=None, min_length=1, max_length=200)
    last_name: str | None = Field(default=None, min_length=1, max_length=200)
    date_of_birth: date | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class PersonRead(BaseModel):
    """Serialized person."""

    id: int
    household_id: int
    first_name: str
    last_name: str
    date_of_birth: date | None = None
    display_name: str
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
