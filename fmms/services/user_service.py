"""User and household data access helpers."""
from __future__ import annotations

import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fmms.core.security import get_password_hash
from fmms.models.household import Household
from fmms.models.user import User, UserStatus

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    slug = _SLUG_PATTERN.sub("-", value.lower()).strip("-")
    return slug or "household"


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Return a user by email address."""
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: int) -> User | None:
    """Return a user by ID."""
    return await session.get(User, user_id)


async def get_household(session: AsyncSession, household_id: int) -> Household | None:
    return await session.get(Household, household_id)


async def _unique_slug(session: AsyncSession, name: str) -> str:
    base = slugify(name)
    result = await session.execute(
        select(Household.slug).where(Household.slug.like(f"{base}%"))
    )
    taken = set(result.scalars().all())
    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


async def create_household(
    session: AsyncSession, *, name: str, timezone: str
) -> Household:
    """Persist a new household with a unique slug."""
    household = Household(
        name=name.strip(), slug=await _unique_slug(session, name), timezone=timezone
    )
    session.add(household)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    await session.refresh(household)
    return household


async def create_user(
    session: AsyncSession,
    *,
    household_id: int,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    status: UserStatus = UserStatus.ACTIVE,
) -> User:
    """Persist a new caregiver with hashed password."""
    user = User(
        household_id=household_id,
        email=email.lower(),
        hashed_password=get_password_hash(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        status=status,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise exc
    await session.refresh(user)
    return user
