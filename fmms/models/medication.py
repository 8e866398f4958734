"""Medication model and supply bookkeeping."""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fmms.db.base import Base
from fmms.models.mixins import SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from fmms.models.person import Person
    from fmms.models.schedule_rule import ScheduleRule


DEFAULT_LOW_SUPPLY_THRESHOLD = 10


class Medication(SoftDeleteMixin, TimestampMixin, Base):
    """A prescription or over-the-counter medication taken by a person."""

    __tablename__ = "medications"

    id: Mapped[int] = mapped_column(primary_key=True)
    person_id: Mapped[int] = mapped_column(
        ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    dosage: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    instructions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    prescribing_doctor: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    pharmacy: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    prescription_date: Mapped[date | None] = mapped_column(Date())
    expiration_date: Mapped[date | None] = mapped_column(Date())
    refills_authorized: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    refills_remaining: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_supply: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    low_supply_threshold: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_LOW_SUPPLY_THRESHOLD
    )
    pills_per_dose: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(Text)

    person: Mapped["Person"] = relationship("Person", back_populates="medications")
    schedules: Mapped[list["ScheduleRule"]] = relationship(
        "ScheduleRule",
        back_populates="medication",
        cascade="all, delete-orphan",
        order_by="ScheduleRule.created_at",
    )

    def days_of_supply_remaining(self, doses_per_day: int = 1) -> int:
        if doses_per_day <= 0:
            return 0
        return self.current_supply // doses_per_day

    def is_supply_low(self) -> bool:
        return 0 < self.current_supply <= self.low_supply_threshold

    def is_out_of_stock(self) -> bool:
        return self.current_supply <= 0

    def needs_refill(self) -> bool:
        return self.is_supply_low() and self.refills_remaining > 0

    def is_expired(self, today: date) -> bool:
        return self.expiration_date is not None and self.expiration_date < today

    def estimated_run_out_date(self, today: date, doses_per_day: int = 1) -> date | None:
        """Date the supply runs out at ``doses_per_day``, or None without supply."""
        if doses_per_day <= 0 or self.current_supply <= 0:
            return None
        return today + timedelta(days=self.days_of_supply_remaining(doses_per_day))

    def take_dose(self, count: int = 1) -> None:
        """Deduct ``count`` units from the supply, never going below zero."""
        if count <= 0:
            raise ValueError("Doses count must be positive")
        self.current_supply = max(self.current_supply - count, 0)
        self.mark_updated()

    def record_refill(self, count: int) -> None:
        """Add ``count`` units and consume one authorised refill if any remain."""
        if count <= 0:
            raise ValueError("Pills count must be positive")
        self.current_supply += count
        if self.refills_remaining > 0:
            self.refills_remaining -= 1
        self.mark_updated()

    def validation_error(self, today: date) -> str | None:
        """Return the first reason this record cannot be saved, if any."""
        if not (self.name or "").strip():
            return "Medication name is required"
        if self.prescription_date is not None and self.prescription_date > today:
            return "Prescription date cannot be in the future"
        if (
            self.prescription_date is not None
            and self.expiration_date is not None
            and self.expiration_date < self.prescription_date
        ):
            return "Expiration date cannot be before the prescription date"
        if min(self.current_supply, self.refills_authorized, self.refills_remaining) < 0:
            return "Supply and refill counts cannot be negative"
        if self.refills_remaining > self.refills_authorized:
            return "Refills remaining cannot exceed refills authorized"
        if self.low_supply_threshold < 0:
            return "Low supply threshold cannot be negative"
        if self.pills_per_dose <= 0:
            return "Pills per dose must be positive"
        return None

    def __str__(self) -> str:
        if not self.dosage:
            return self.name
        return f"{self.name} ({self.dosage})"
