"""Reminder schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Reminder(BaseModel):
    """A dose that is due now."""

    medication_id: int
    schedule_id: int
    person_id: int
    person_name: str
    medication_name: str
    dosage: str
    schedule_type: str
    scheduled_at: datetime
    scheduled_time: str
    title: str
    message: str


class UpcomingDose(BaseModel):
    """A scheduled dose inside the look-ahead horizon."""

    medication_id: int
    schedule_id: int
    person_name: str
    medication_name: str
    schedule_type: str
    due_at: datetime
    description: str
