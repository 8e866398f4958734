"""Reporting schemas."""
from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class LowSupplyEntry(BaseModel):
    medication_id: int
    name: str
    person_name: str
    current_supply: int
    low_supply_threshold: int
    refills_remaining: int


class DashboardSummary(BaseModel):
    """Household-wide counts shown on the home screen."""

    total_people: int
    total_medications: int
    active_medications: int
    low_supply_count: int
    needs_refill_count: int
    expired_count: int
    low_supply: list[LowSupplyEntry]


class MedicationSummaryRow(BaseModel):
    person_id: int
    person_name: str
    medication_id: int
    medication_name: str
    dosage: str
    current_supply: int
    low_supply_threshold: int
    refills_remaining: int
    is_active: bool
    is_supply_low: bool
    is_expired: bool
    pharmacy: str


class MedicationSummaryStatistics(BaseModel):
    total_people: int
    total_medications: int
    active_medications: int
    low_supply_medications: int
    expired_medications: int
    medications_needing_refill: int


class MedicationSummaryReport(BaseModel):
    """Every medication grouped by person, with totals."""

    title: str = "Comprehensive Medication Summary Report"
    generated_at: datetime
    as_of: date
    rows: list[MedicationSummaryRow]
    statistics: MedicationSummaryStatistics


class PersonSummaryRow(BaseModel):
    id: int
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime
    is_deleted: bool

    model_config = ConfigDict(from_attributes=True)


class PeopleSummaryReport(BaseModel):
    """All family members, including removed ones."""

    title: str = "Family Members Summary Report"
    generated_at: datetime
    rows: list[PersonSummaryRow]
