"""Medication schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from fmms.schemas.schedule import MinuteOfDay

if TYPE_CHECKING:
    from fmms.models.medication import Medication


class MedicationBase(BaseModel):
    """Shared medication fields."""

    name: str = Field(min_length=1, max_length=200)
    dosage: str = Field(default="", max_length=120)
    instructions: str = ""
    prescribing_doctor: str = Field(default="", max_length=200)
    pharmacy: str = Field(default="", max_length=200)
    prescription_date: date | None = None
    expiration_date: date | None = None
    refills_authorized: int = Field(default=0, ge=0)
    refills_remaining: int = Field(default=0, ge=0)
    current_supply: int = Field(default=0, ge=0)
    low_supply_threshold: int = Field(default=10, ge=0)
    pills_per_dose: int = Field(default=1, ge=1)
    is_active: bool = True
    notes: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class MedicationCreate(MedicationBase):
    """Payload for creating a medication."""

    person_id: int


class MedicationUpdate(BaseModel):
    """Mutable medication fields."""

    person_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    dosage: str | None = Field(default=None, max_length=120)
    instructions: str | None = None
    prescribing_doctor: str | None = Field(default=None, max_length=200)
    pharmacy: str | None = Field(default=None, max_length=200)
    prescription_date: date | None = None
    expiration_date: date | None = None
    refills_authorized: int | None = Field(default=None, ge=0)
    refills_remaining: int | None = Field(default=None, ge=0)
    current_supply: int | None = Field(default=None, ge=0)
    low_supply_threshold: int | None = Field(default=None, ge=0)
    pills_per_dose: int | None = Field(default=None, ge=1)
    is_active: bool | None = None
    notes: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class MedicationRead(MedicationBase):
    """Serialized medication with its supply status."""

    id: int
    person_id: int
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
    is_supply_low: bool = False
    is_out_of_stock: bool = False
    needs_refill: bool = False
    is_expired: bool = False
    days_of_supply_remaining: int = 0
    estimated_run_out_date: date | None = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, medication: "Medication", *, today: date) -> "MedicationRead":
        return cls.model_validate(
            {
                **{name: getattr(medication, name) for name in _COLUMN_FIELDS},
                "is_supply_low": medication.is_supply_low(),
                "is_out_of_stock": medication.is_out_of_stock(),
                "needs_refill": medication.needs_refill(),
                "is_expired": medication.is_expired(today),
                "days_of_supply_remaining": medication.days_of_supply_remaining(),
                "estimated_run_out_date": medication.estimated_run_out_date(today),
            }
        )


_COLUMN_FIELDS = (
    *MedicationBase.model_fields,
    "id",
    "person_id",
    "is_deleted",
    "created_at",
    "updated_at",
)


class TakeDoseRequest(BaseModel):
    """Optional override of when the dose was taken."""

    taken_at: datetime | None = None


class RefillRequest(BaseModel):
    """Units added to the supply by a refill."""

    count: int = Field(ge=1)


class DailyTimesUpdate(BaseModel):
    """Replacement list of daily dose times in minutes after midnight."""

    times_of_day: list[MinuteOfDay] = Field(default_factory=list)

    def cleaned(self) -> list[int]:
        return sorted(set(self.times_of_day))
