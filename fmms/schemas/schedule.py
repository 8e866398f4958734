"""Schedule rule schemas."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field

from fmms.scheduling import AsNeededRule, DailyRule, IntervalRule, WeeklyRule
from fmms.scheduling.window import MINUTES_PER_DAY

if TYPE_CHECKING:
    from fmms.models.schedule_rule import ScheduleRule

# Minutes after midnight.
MinuteOfDay = Annotated[int, Field(ge=0, lt=MINUTES_PER_DAY)]


class ScheduleFields(BaseModel):
    """Variant-specific settings; only those of the schedule's type may be set."""

    is_active: bool | None = None
    notes: str | None = None
    times_of_day: list[MinuteOfDay] | None = None
    interval_amount: int | None = None
    interval_unit: str | None = None
    start_at: datetime | None = None
    days_of_week: list[str] | None = None
    time_of_day: MinuteOfDay | None = None
    minimum_hours_between_doses: int | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class ScheduleCreate(ScheduleFields):
    """Payload for attaching a schedule to a medication."""

    schedule_type: str = Field(min_length=1)


class ScheduleUpdate(ScheduleFields):
    """Mutable schedule settings."""


class ScheduleRead(BaseModel):
    """Serialized schedule together with its evaluated state."""

    id: int
    medication_id: int
    schedule_type: str
    is_active: bool
    notes: str | None = None
    times_of_day: list[int] | None = None
    interval_amount: int | None = None
    interval_unit: str | None = None
    start_at: datetime | None = None
    days_of_week: list[str] | None = None
    time_of_day: int | None = None
    minimum_hours_between_doses: int | None = None
    last_dose_at: datetime | None = None
    description: str
    next_dose_at: datetime | None = None
    configuration_issue: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, schedule: "ScheduleRule", *, now: datetime) -> "ScheduleRead":
        rule = schedule.as_rule()
        data: dict[str, object] = {
            "id": schedule.id,
            "medication_id": schedule.medication_id,
            "schedule_type": schedule.schedule_type,
            "is_active": rule.is_active,
            "notes": rule.notes,
            "description": rule.describe(),
            "next_dose_at": rule.next_dose(now),
            "configuration_issue": rule.configuration_issue(),
            "created_at": schedule.created_at,
            "updated_at": schedule.updated_at,
        }
        if isinstance(rule, DailyRule):
            data["times_of_day"] = list(rule.times_of_day)
        elif isinstance(rule, IntervalRule):
            data.update(
                interval_amount=rule.interval_amount,
                interval_unit=rule.interval_unit,
                start_at=rule.start_at,
            )
        elif isinstance(rule, WeeklyRule):
            data.update(
                days_of_week=[day.label for day in rule.days_of_week],
                time_of_day=rule.time_of_day,
            )
        elif isinstance(rule, AsNeededRule):
            data.update(
                minimum_hours_between_doses=rule.minimum_hours_between_doses,
                last_dose_at=rule.last_dose_at,
            )
        return cls.model_validate(data)


class DoseRecordRequest(BaseModel):
    taken_at: datetime | None = None


class ScheduleEvaluation(BaseModel):
    """Outcome of evaluating one schedule at a point in time."""

    schedule_id: int
    at: datetime
    is_due: bool
    next_dose_at: datetime | None = None
    description: str
