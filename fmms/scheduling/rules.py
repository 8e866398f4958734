"""Schedule rule strategies.

Each rule answers three questions for a medication: when the next dose is
(``next_dose``), whether a dose is due at a given moment (``is_due_at``) and
how the pattern reads to a person (``describe``). Rules are immutable values;
an incomplete configuration never raises, it simply yields no next dose and is
never due. ``configuration_issue`` names what is missing for diagnostics.

All datetimes are compared as given, so callers must use one convention
(household-local wall clock in this application) for every argument.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import ClassVar, Iterable

from fmms.scheduling.window import (
    DAILY_DUE_WINDOW_MINUTES,
    INTERVAL_DUE_WINDOW_MINUTES,
    WEEKLY_DUE_WINDOW_MINUTES,
    format_clock,
    is_valid_minute_of_day,
    minute_of_day,
    minutes_within,
    start_of_day,
    within_window,
)


class ScheduleType(str, enum.Enum):
    """Discriminator tags for the supported schedule variants."""

    DAILY = "Daily"
    INTERVAL = "Interval"
    WEEKLY = "Weekly"
    AS_NEEDED = "AsNeeded"


class IntervalUnit(str, enum.Enum):
    """Units an interval schedule can repeat in."""

    HOURS = "Hours"
    DAYS = "Days"

    @classmethod
    def parse(cls, value: str | None) -> IntervalUnit | None:
        if not value:
            return None
        normalized = value.strip().lower()
        for unit in cls:
            if unit.value.lower() == normalized:
                return unit
        return None

    @property
    def step(self) -> timedelta:
        if self is IntervalUnit.HOURS:
            return timedelta(hours=1)
        return timedelta(days=1)

    @property
    def label(self) -> str:
        return "hour(s)" if self is IntervalUnit.HOURS else "day(s)"


class Weekday(enum.IntEnum):
    """Days of the week numbered like :meth:`datetime.weekday`."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.title()

    @classmethod
    def parse(cls, value: object) -> Weekday | None:
        if isinstance(value, Weekday):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls[value.strip().upper()]
        except KeyError:
            return None


def parse_times_of_day(raw: str | Iterable[int | str] | None) -> tuple[int, ...]:
    """Parse stored minute offsets, skipping anything unusable.

    Accepts the comma-separated storage form (``"480, 1200"``) or an iterable.
    The result is sorted and free of duplicates.
    """
    if not raw:
        return ()
    parts = raw.split(",") if isinstance(raw, str) else raw
    minutes: set[int] = set()
    for part in parts:
        try:
            value = int(str(part).strip())
        except ValueError:
            continue
        if is_valid_minute_of_day(value):
            minutes.add(value)
    return tuple(sorted(minutes))


def parse_days_of_week(raw: str | Iterable[object] | None) -> tuple[Weekday, ...]:
    """Parse weekday names, keeping the configured order and dropping repeats."""
    if not raw:
        return ()
    parts = raw.split(",") if isinstance(raw, str) else raw
    days: list[Weekday] = []
    for part in parts:
        day = Weekday.parse(part)
        if day is not None and day not in days:
            days.append(day)
    return tuple(days)


@dataclass(slots=True, frozen=True)
class DailyRule:
    """Doses at one or more fixed times every day."""

    schedule_type: ClassVar[ScheduleType] = ScheduleType.DAILY
    due_window: ClassVar[int] = DAILY_DUE_WINDOW_MINUTES

    medication_id: int
    times_of_day: tuple[int, ...] = ()
    is_active: bool = True
    notes: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "times_of_day", parse_times_of_day(self.times_of_day))

    def next_dose(self, from_time: datetime) -> datetime | None:
        if not self.is_active or not self.times_of_day:
            return None
        midnight = start_of_day(from_time)
        for minutes in self.times_of_day:
            candidate = midnight + timedelta(minutes=minutes)
            if candidate > from_time:
                return candidate
        return midnight + timedelta(days=1, minutes=self.times_of_day[0])

    def due_time_at(self, instant: datetime) -> int | None:
        """Return the configured offset that makes the rule due at ``instant``."""
        if not self.is_active:
            return None
        current = minute_of_day(instant)
        for minutes in self.times_of_day:
            if minutes_within(current, minutes, self.due_window):
                return minutes
        return None

    def is_due_at(self, instant: datetime) -> bool:
        return self.due_time_at(instant) is not None

    def describe(self) -> str:
        if not self.times_of_day:
            return "Daily (no times specified)"
        return "Daily at " + ", ".join(format_clock(m) for m in self.times_of_day)

    def configuration_issue(self) -> str | None:
        if not self.times_of_day:
            return "no times of day configured"
        return None


@dataclass(slots=True, frozen=True)
class IntervalRule:
    """Doses every N hours or days counted from an anchor time."""

    schedule_type: ClassVar[ScheduleType] = ScheduleType.INTERVAL
    due_window: ClassVar[int] = INTERVAL_DUE_WINDOW_MINUTES

    medication_id: int
    interval_amount: int = 1
    interval_unit: str = IntervalUnit.HOURS.value
    start_at: datetime | None = None
    is_active: bool = True
    notes: str | None = None

    def step(self) -> timedelta | None:
        unit = IntervalUnit.parse(self.interval_unit)
        if unit is None or self.interval_amount <= 0:
            return None
        return unit.step * self.interval_amount

    def next_dose(self, from_time: datetime) -> datetime | None:
        if not self.is_active or self.start_at is None:
            return None
        step = self.step()
        if step is None:
            return None
        if self.start_at > from_time:
            return self.start_at
        completed = (from_time - self.start_at) // step
        return self.start_at + step * (completed + 1)

    def is_due_at(self, instant: datetime) -> bool:
        if not self.is_active or self.start_at is None or instant < self.start_at:
            return False
        upcoming = self.next_dose(instant)
        if upcoming is None:
            return False
        return within_window(instant, upcoming, timedelta(minutes=self.due_window))

    def describe(self) -> str:
        unit = IntervalUnit.parse(self.interval_unit)
        label = unit.label if unit is not None else (self.interval_unit or "").lower()
        return f"Every {self.interval_amount} {label}".rstrip()

    def configuration_issue(self) -> str | None:
        if self.interval_amount <= 0:
            return "interval amount must be positive"
        if IntervalUnit.parse(self.interval_unit) is None:
            return f"unknown interval unit {self.interval_unit!r}"
        if self.start_at is None:
            return "no start time configured"
        return None


@dataclass(slots=True, frozen=True)
class WeeklyRule:
    """Doses at one time of day on selected weekdays."""

    schedule_type: ClassVar[ScheduleType] = ScheduleType.WEEKLY
    due_window: ClassVar[int] = WEEKLY_DUE_WINDOW_MINUTES

    medication_id: int
    days_of_week: tuple[Weekday, ...] = ()
    time_of_day: int = 480
    is_active: bool = True
    notes: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "days_of_week", parse_days_of_week(self.days_of_week))

    def _schedulable(self) -> bool:
        return (
            self.is_active
            and bool(self.days_of_week)
            and is_valid_minute_of_day(self.time_of_day)
        )

    def next_dose(self, from_time: datetime) -> datetime | None:
        if not self._schedulable():
            return None
        today = start_of_day(from_time) + timedelta(minutes=self.time_of_day)
        if from_time.weekday() in self.days_of_week and today > from_time:
            return today
        for offset in range(1, 8):
            candidate = today + timedelta(days=offset)
            if candidate.weekday() in self.days_of_week:
                return candidate
        return None

    def is_due_at(self, instant: datetime) -> bool:
        if not self._schedulable() or instant.weekday() not in self.days_of_week:
            return False
        return minutes_within(minute_of_day(instant), self.time_of_day, self.due_window)

    def describe(self) -> str:
        if not self.days_of_week:
            return "Weekly (no days specified)"
        clock = format_clock(self.time_of_day)
        if len(self.days_of_week) == len(Weekday):
            return f"Daily at {clock}"
        days = ", ".join(day.label for day in self.days_of_week)
        return f"Weekly on {days} at {clock}"

    def configuration_issue(self) -> str | None:
        if not self.days_of_week:
            return "no days of week configured"
        if not is_valid_minute_of_day(self.time_of_day):
            return f"time of day {self.time_of_day} is outside 0-1439"
        return None


@dataclass(slots=True, frozen=True)
class AsNeededRule:
    """Taken when needed, optionally with a minimum gap between doses."""

    schedule_type: ClassVar[ScheduleType] = ScheduleType.AS_NEEDED

    medication_id: int
    minimum_hours_between_doses: int = 0
    last_dose_at: datetime | None = None
    is_active: bool = True
    notes: str | None = None

    def _guard(self) -> timedelta | None:
        if self.minimum_hours_between_doses <= 0 or self.last_dose_at is None:
            return None
        return timedelta(hours=self.minimum_hours_between_doses)

    def next_dose(self, from_time: datetime) -> datetime | None:
        """Return when the next dose becomes allowed, or None if it already is."""
        if not self.is_active:
            return None
        guard = self._guard()
        if guard is None:
            return None
        allowed_at = self.last_dose_at + guard
        if allowed_at > from_time:
            return allowed_at
        return None

    def is_due_at(self, instant: datetime) -> bool:
        if not self.is_active:
            return False
        guard = self._guard()
        if guard is None:
            return True
        return instant - self.last_dose_at >= guard

    def record_dose(self, taken_at: datetime) -> AsNeededRule:
        return replace(self, last_dose_at=taken_at)

    def describe(self) -> str:
        if self.minimum_hours_between_doses > 0:
            return (
                f"As needed (minimum {self.minimum_hours_between_doses} "
                "hours between doses)"
            )
        return "As needed"

    def configuration_issue(self) -> str | None:
        if self.minimum_hours_between_doses < 0:
            return "minimum hours between doses cannot be negative"
        return None


Rule = DailyRule | IntervalRule | WeeklyRule | AsNeededRule

RULE_TYPES: dict[ScheduleType, type[Rule]] = {
    ScheduleType.DAILY: DailyRule,
    ScheduleType.INTERVAL: IntervalRule,
    ScheduleType.WEEKLY: WeeklyRule,
    ScheduleType.AS_NEEDED: AsNeededRule,
}
