"""Bootstrap helpers for default data."""

from __future__ import annotations

import logging

from sqlalchemy import select

from fmms.core.config import get_settings
from fmms.db.session import get_sessionmaker
from fmms.models import Household, User
from fmms.services.user_service import create_household, create_user

logger = logging.getLogger(__name__)

DEFAULT_USER_FIRST = "Family"
DEFAULT_USER_LAST = "Caregiver"


async def ensure_default_user() -> None:
    """Create the configured default caregiver if one does not yet exist."""

    settings = get_settings()
    if not settings.default_user_email or not settings.default_user_password:
        logger.debug("No default caregiver configured; skipping bootstrap")
        return
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        existing = await session.execute(
            select(User).where(User.email == settings.default_user_email.lower())
        )
        if existing.scalar_one_or_none() is not None:
            return

        household_result = await session.execute(
            select(Household).order_by(Household.created_at.asc()).limit(1)
        )
        household = household_result.scalar_one_or_none()
        if household is None:
            household = await create_household(
                session,
                name=settings.default_household_name,
                timezone=settings.default_timezone,
            )

        await create_user(
            session,
            household_id=household.id,
            email=settings.default_user_email,
            password=settings.default_user_password,
            first_name=DEFAULT_USER_FIRST,
            last_name=DEFAULT_USER_LAST,
        )
        logger.info("Created default caregiver for household %s", household.slug)
