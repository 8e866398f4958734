"""Search schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class SearchResult(BaseModel):
    """One hit from a search across people, medications and schedules."""

    entity_type: str
    entity_id: int
    title: str
    subtitle: str = ""
    details: str = ""
    person_id: int | None = None
    timestamp: datetime | None = None
