"""ORM models exposed for convenience."""

from fmms.models.household import Household
from fmms.models.medication import Medication
from fmms.models.person import Person
from fmms.models.schedule_rule import (
    SCHEDULE_MODELS,
    AsNeededSchedule,
    DailySchedule,
    IntervalSchedule,
    ScheduleRule,
    WeeklySchedule,
)
from fmms.models.user import User, UserStatus

__all__ = [
    "SCHEDULE_MODELS",
    "AsNeededSchedule",
    "DailySchedule",
    "Household",
    "IntervalSchedule",
    "Medication",
    "Person",
    "ScheduleRule",
    "User",
    "UserStatus",
    "WeeklySchedule",
]
