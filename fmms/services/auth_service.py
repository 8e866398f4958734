"""Authentication service helpers."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fmms.core.config import get_settings
from fmms.core.security import create_access_token, verify_password
from fmms.models.household import Household
from fmms.models.user import User, UserStatus
from fmms.schemas.auth import RegistrationRequest
from fmms.services import user_service

logger = logging.getLogger(__name__)


async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> User | None:
    """Validate credentials and return a user if correct."""
    user = await user_service.get_user_by_email(session, email=email)
    if user is None:
        return None
    if user.status != UserStatus.ACTIVE:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_access_token_for_user(user: User) -> str:
    """Generate a JWT for a user."""
    return create_access_token(str(user.id), household_id=user.household_id)


async def register_household(
    session: AsyncSession, payload: RegistrationRequest
) -> tuple[User, Household]:
    """Create a household and its first caregiver."""
    if await user_service.get_user_by_email(session, email=payload.email) is not None:
        raise ValueError("Email is already registered")
    household = await user_service.create_household(
        session,
        name=payload.household_name,
        timezone=payload.timezone or get_settings().default_timezone,
    )
    user = await user_service.create_user(
        session,
        household_id=household.id,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    logger.info("Registered household %s", household.slug)
    return user, household
