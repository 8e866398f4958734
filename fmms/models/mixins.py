"""Common ORM mixins."""
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TimestampMixin:
    """Mixin that adds created/updated timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )

    def mark_updated(self) -> None:
        self.updated_at = _utcnow()


class SoftDeleteMixin:
    """Mixin for records that are flagged as deleted instead of removed."""

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )

    def soft_delete(self) -> None:
        self.is_deleted = True
        if isinstance(self, TimestampMixin):
            self.mark_updated()
