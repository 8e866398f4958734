"""Family member profile."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fmms.db.base import Base
from fmms.models.mixins import SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from fmms.models.household import Household
    from fmms.models.medication import Medication


class Person(SoftDeleteMixin, TimestampMixin, Base):
    """Represents a family member whose medications are tracked."""

    __tablename__ = "people"
    __table_args__ = (
        Index("ix_people_household_name", "household_id", "last_name", "first_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    first_name: Mapped[str] = mapped_column(String(200), nullable=False)
    last_name: Mapped[str] = mapped_column(String(200), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date())

    household: Mapped["Household"] = relationship("Household", back_populates="people")
    medications: Mapped[list["Medication"]] = relationship(
        "Medication", back_populates="person", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return self.display_name
