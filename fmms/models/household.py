"""Household model: the tenant that owns people, medications and logins."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fmms.db.base import Base
from fmms.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from fmms.models.person import Person
    from fmms.models.user import User


class Household(TimestampMixin, Base):
    """A family sharing one medication cabinet."""

    __tablename__ = "households"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")

    users: Mapped[list["User"]] = relationship(
        "User", back_populates="household", cascade="all, delete-orphan"
    )
    people: Mapped[list["Person"]] = relationship(
        "Person", back_populates="household", cascade="all, delete-orphan"
    )
