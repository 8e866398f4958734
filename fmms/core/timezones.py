"""Household-local clock helpers.

Schedule rules work on naive wall-clock datetimes in the household's timezone;
these helpers convert between that convention and aware datetimes.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def resolve_timezone(name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):  # pragma: no cover - depends on system tz database
        logger.warning("Unknown timezone %r; falling back to UTC", name)
        return ZoneInfo("UTC")


def to_local_naive(moment: datetime, tz: ZoneInfo) -> datetime:
    """Express ``moment`` as household wall-clock time without tzinfo.

    Naive input is assumed to already be wall-clock time.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz).replace(tzinfo=None)


def local_now(tz: ZoneInfo) -> datetime:
    return to_local_naive(datetime.now(UTC), tz)
