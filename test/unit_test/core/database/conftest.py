"""Test configuration for database unit tests.

Provides an in-memory SQLite engine with the fleet schema, a session on it,
and helpers to seed vehicles for two different users.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from fleet_tracker.core.database.entities import Vehicle
from fleet_tracker.core.database.repositories import SqlRepoBundle, build_sql_repos
from fleet_tracker.core.database.utils import create_all, create_sessionmaker


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine with every fleet table."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def stranger_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def repos(in_memory_session: AsyncSession, owner_id: uuid.UUID) -> SqlRepoBundle:
    return build_sql_repos(session=in_memory_session, user_id=owner_id)


@pytest.fixture
def stranger_repos(in_memory_session: AsyncSession, stranger_id: uuid.UUID) -> SqlRepoBundle:
    return build_sql_repos(session=in_memory_session, user_id=stranger_id)


@pytest.fixture
async def vehicle(repos: SqlRepoBundle) -> Vehicle:
    return await repos.vehicles.create(
        Vehicle(
            registration="AB12 CDE",
            make="Ford",
            model="Transit",
            mot_due_date=date(2027, 3, 1),
            annual_tax=290,
            fuel_type="diesel",
        )
    )


@pytest.fixture
async def stranger_vehicle(stranger_repos: SqlRepoBundle) -> Vehicle:
    return await stranger_repos.vehicles.create(Vehicle(registration="XY99 ZZZ", make="Vauxhall", model="Vivaro"))
