"""Test fixtures for the medication manager backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")

from fmms.core.config import get_settings
from fmms.core.security import get_password_hash
from fmms.db.base import Base
from fmms.db.session import dispose_engine, get_sessionmaker
from fmms.main import app
from fmms.models import Household, User, UserStatus


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


async def authenticate(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture()
async def app_context(
    reset_database: None, db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an authenticated async client and seeded household data."""
    sessionmaker = get_sessionmaker(db_url)
    password = "Passw0rd!"

    async with sessionmaker() as session:
        household = Household(name="Test Family", slug="test-family", timezone="UTC")
        session.add(household)
        await session.flush()

        other = Household(name="Other Family", slug="other-family", timezone="UTC")
        session.add(other)
        await session.flush()

        caregiver = User(
            household_id=household.id,
            email="parent@example.com",
            hashed_password=get_password_hash(password),
            first_name="Pat",
            last_name="Parent",
            status=UserStatus.ACTIVE,
        )
        outsider = User(
            household_id=other.id,
            email="outsider@example.com",
            hashed_password=get_password_hash(password),
            first_name="Olly",
            last_name="Outsider",
            status=UserStatus.ACTIVE,
        )
        session.add_all([caregiver, outsider])
        await session.commit()

        context: dict[str, object] = {
            "household_id": household.id,
            "other_household_id": other.id,
            "user_id": caregiver.id,
            "email": caregiver.email,
            "password": password,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        context["headers"] = await authenticate(client, "parent@example.com", password)
        context["outsider_headers"] = await authenticate(
            client, "outsider@example.com", password
        )
        yield context
