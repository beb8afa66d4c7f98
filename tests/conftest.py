from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.api.deps import get_db
from app.core.security import get_current_user, FirebaseUser
from app.models import AppUser, UserStatistics, UserSignal, UserTasteProfile  # noqa: F401


# Use SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_UID = "test_firebase_uid"
TEST_EMAIL = "coffee.fan@example.com"

FIXED_NOW = datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """Deterministic clock for the signal aggregator."""
    return lambda: FIXED_NOW


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def test_session(test_session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with test_session_maker() as session:
        yield session


@pytest.fixture
def firebase_user() -> FirebaseUser:
    """Identity returned by the mocked token verifier."""
    return FirebaseUser(uid=TEST_UID, email=TEST_EMAIL, name=None)


@pytest_asyncio.fixture(scope="function")
async def client(
    test_session: AsyncSession,
    firebase_user: FirebaseUser,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with mocked authentication.

    Only the Firebase verification is replaced; user provisioning runs for
    real against the test database.
    """

    async def override_get_db():
        yield test_session

    async def override_get_current_user():
        return firebase_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
