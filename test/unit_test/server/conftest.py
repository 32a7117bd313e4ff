import uuid
from typing import AsyncGenerator, Dict
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from fleet_tracker.core.database.repositories import SqlRepoBundle, build_sql_repos
from fleet_tracker.core.database.utils import create_all, create_sessionmaker

# Use in-memory SQLite for testing
# Note: We use check_same_thread=False for SQLite with async
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database with the fleet schema for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def other_user_id() -> uuid.UUID:
    return uuid.uuid4()


def make_token(user_id: uuid.UUID, **claims) -> str:
    """Sign a bearer token the way the auth provider does."""
    from fleet_tracker.server.core.config import settings

    payload = {"sub": str(user_id), **claims}
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)


@pytest.fixture
def auth_headers(user_id) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def other_auth_headers(other_user_id) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(other_user_id)}"}


@pytest.fixture
def repos(session, user_id) -> SqlRepoBundle:
    """Repositories for the authenticated test user, sharing the client's session."""
    return build_sql_repos(session=session, user_id=user_id)


@pytest.fixture
def other_repos(session, other_user_id) -> SqlRepoBundle:
    return build_sql_repos(session=session, user_id=other_user_id)


@pytest.fixture
def webhook_keys(monkeypatch, test_config):
    """Configure both webhook API keys from the test settings."""
    from fleet_tracker.server.core.config import settings

    monkeypatch.setattr(settings, "mileage_import_api_key", test_config.auth.mileage_import_api_key)
    monkeypatch.setattr(settings, "fuel_email_api_key", test_config.auth.fuel_email_api_key)
    return test_config.auth


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from fleet_tracker.core.database import get_session
    from fleet_tracker.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("fleet_tracker.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()
