"""Persisted schedule rules.

All variants share the ``schedule_rules`` table and are told apart by the
``schedule_type`` discriminator. Each mapped class converts to and from the
immutable rule values in :mod:`fmms.scheduling`, which do the evaluation.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fmms.db.base import Base
from fmms.models.mixins import SoftDeleteMixin, TimestampMixin
from fmms.scheduling import (
    AsNeededRule,
    DailyRule,
    IntervalRule,
    IntervalUnit,
    Rule,
    ScheduleType,
    WeeklyRule,
)

if TYPE_CHECKING:
    from fmms.models.medication import Medication


class ScheduleRule(SoftDeleteMixin, TimestampMixin, Base):
    """Common columns for every schedule variant."""

    __tablename__ = "schedule_rules"

    id: Mapped[int] = mapped_column(primary_key=True)
    medication_id: Mapped[int] = mapped_column(
        ForeignKey("medications.id", ondelete="CASCADE"), nullable=False, index=True
    )
    schedule_type: Mapped[str] = mapped_column(String(32), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(Text)

    # Daily
    times_of_day: Mapped[str | None] = mapped_column(String(512))
    # Interval
    interval_amount: Mapped[int | None] = mapped_column(Integer)
    interval_unit: Mapped[str | None] = mapped_column(String(16))
    start_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))
    # Weekly
    days_of_week: Mapped[str | None] = mapped_column(String(128))
    time_of_day: Mapped[int | None] = mapped_column(Integer)
    # AsNeeded
    minimum_hours_between_doses: Mapped[int | None] = mapped_column(Integer)
    last_dose_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))

    medication: Mapped["Medication"] = relationship(
        "Medication", back_populates="schedules"
    )

    __mapper_args__ = {"polymorphic_on": "schedule_type"}

    def as_rule(self) -> Rule:
        """Return the rule value stored in this row; each variant overrides this."""
        raise ValueError(f"Unknown schedule type: {self.schedule_type}")

    def apply_rule(self, rule: Rule) -> None:
        """Copy the fields of ``rule`` onto this row."""
        if rule.schedule_type.value != self.schedule_type:
            raise ValueError(
                f"Cannot store a {rule.schedule_type.value} rule on a "
                f"{self.schedule_type} schedule"
            )
        self.is_active = rule.is_active
        self.notes = rule.notes
        if isinstance(rule, DailyRule):
            self.times_of_day = ",".join(str(minutes) for minutes in rule.times_of_day)
        elif isinstance(rule, IntervalRule):
            self.interval_amount = rule.interval_amount
            self.interval_unit = rule.interval_unit
            self.start_at = rule.start_at
        elif isinstance(rule, WeeklyRule):
            self.days_of_week = ",".join(day.label for day in rule.days_of_week)
            self.time_of_day = rule.time_of_day
        elif isinstance(rule, AsNeededRule):
            self.minimum_hours_between_doses = rule.minimum_hours_between_doses
            self.last_dose_at = rule.last_dose_at
        self.mark_updated()

    @classmethod
    def from_rule(cls, rule: Rule) -> ScheduleRule:
        """Build an unsaved row of the matching subclass for ``rule``."""
        model = SCHEDULE_MODELS[rule.schedule_type]
        row = model(medication_id=rule.medication_id, schedule_type=rule.schedule_type.value)
        row.apply_rule(rule)
        return row


class DailySchedule(ScheduleRule):
    __mapper_args__ = {"polymorphic_identity": ScheduleType.DAILY.value}

    def as_rule(self) -> DailyRule:
        return DailyRule(
            medication_id=self.medication_id,
            times_of_day=self.times_of_day or "",
            is_active=self.is_active,
            notes=self.notes,
        )


class IntervalSchedule(ScheduleRule):
    __mapper_args__ = {"polymorphic_identity": ScheduleType.INTERVAL.value}

    def as_rule(self) -> IntervalRule:
        return IntervalRule(
            medication_id=self.medication_id,
            interval_amount=self.interval_amount if self.interval_amount is not None else 1,
            interval_unit=self.interval_unit or IntervalUnit.HOURS.value,
            start_at=self.start_at,
            is_active=self.is_active,
            notes=self.notes,
        )


class WeeklySchedule(ScheduleRule):
    __mapper_args__ = {"polymorphic_identity": ScheduleType.WEEKLY.value}

    def as_rule(self) -> WeeklyRule:
        return WeeklyRule(
            medication_id=self.medication_id,
            days_of_week=self.days_of_week or "",
            time_of_day=self.time_of_day if self.time_of_day is not None else 480,
            is_active=self.is_active,
            notes=self.notes,
        )


class AsNeededSchedule(ScheduleRule):
    __mapper_args__ = {"polymorphic_identity": ScheduleType.AS_NEEDED.value}

    def as_rule(self) -> AsNeededRule:
        return AsNeededRule(
            medication_id=self.medication_id,
            minimum_hours_between_doses=self.minimum_hours_between_doses or 0,
            last_dose_at=self.last_dose_at,
            is_active=self.is_active,
            notes=self.notes,
        )


SCHEDULE_MODELS: dict[ScheduleType, type[ScheduleRule]] = {
    ScheduleType.DAILY: DailySchedule,
    ScheduleType.INTERVAL: IntervalSchedule,
    ScheduleType.WEEKLY: WeeklySchedule,
    ScheduleType.AS_NEEDED: AsNeededSchedule,
}
