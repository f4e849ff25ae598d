"""
Shared test fixtures for the Folio API tests.

Provides the SQLite test database, an HTTP client wired to it, signed-in
user fixtures and in-memory service fixtures for the loader and mutation
tests.
"""

import uuid
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from folio.auth.jwt import create_access_token
from folio.auth.password import hash_password
from folio.config import settings
from folio.database import Base, create_engine_for, create_session_factory, get_db
from folio.main import app
from folio.middleware.rate_limit import reset_limiter
from folio.models.user import User
from folio.services.cache import QueryCache
from folio.services.dashboard import DashboardLoader
from folio.services.mutations import build_mutations
from folio.services.portfolio import PublicPortfolioLoader
from folio.services.record_store import SqlRecordStore
from folio.services.storage import ObjectStorage
from folio.services.username import Debouncer, UsernameChecker

from factories import FakeClock, InMemoryRecordStore

# Cheap hashes keep the suite fast.
settings.bcrypt_rounds = 4

test_engine = create_engine_for(settings.test_database_url)
TestSessionLocal = create_session_factory(test_engine)

CACHE_TTL = 30 * 60

# Services on app.state replaced per API test.
SWAPPED_STATE = ("cache", "record_store", "storage", "username_debouncer")


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Reset rate limiter before each test to ensure test isolation."""
    reset_limiter()
    yield


# --- In-memory service fixtures ---


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def cache(clock: FakeClock) -> QueryCache:
    return QueryCache(default_ttl=CACHE_TTL, clock=clock)


@pytest.fixture
def loader(store, cache) -> DashboardLoader:
    return DashboardLoader(store, cache, CACHE_TTL)


@pytest.fixture
def portfolio_loader(store, cache) -> PublicPortfolioLoader:
    return PublicPortfolioLoader(store, cache, 5 * 60)


@pytest.fixture
def usernames(store) -> UsernameChecker:
    return UsernameChecker(store, Debouncer(0))


@pytest.fixture
def mutations(store, cache, usernames):
    return build_mutations(store, cache, usernames)


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create tables before each test function, drop after.
    Provides isolated database state per test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession, tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client configured for testing.

    Routes and the record store share the test database; every test starts
    with an empty cache, storage under ``tmp_path`` and no username
    debounce delay.
    """

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    saved = {name: getattr(app.state, name) for name in SWAPPED_STATE}
    app.state.cache = QueryCache(default_ttl=settings.dashboard_cache_ttl_seconds)
    app.state.record_store = SqlRecordStore(TestSessionLocal)
    app.state.storage = ObjectStorage(tmp_path, settings.storage_public_path, settings.max_upload_bytes)
    app.state.username_debouncer = Debouncer(0)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()
    for name, value in saved.items():
        setattr(app.state, name, value)


@pytest.fixture
def app_cache(async_client: AsyncClient) -> QueryCache:
    """The cache the running app uses for this test."""
    return app.state.cache


# --- Authentication Helper Fixtures ---


@pytest.fixture
def valid_registration_data() -> dict[str, str]:
    return {
        "email": "newuser@example.com",
        "password": "SecurePassword123!",
        "full_name": "New User",
    }


async def _create_user(
    db_session: AsyncSession,
    email: str,
    password: str,
    full_name: str | None,
) -> dict[str, Any]:
    """Create a user and a Bearer header for it."""
    user = User(
        email=email.lower(),
        password_hash=hash_password(password),
        full_name=full_name,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    return {
        "user_id": str(user.id),
        "email": user.email,
        "password": password,
        "full_name": full_name,
        "headers": {"Authorization": f"Bearer {create_access_token(str(user.id))}"},
    }


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> dict[str, Any]:
    return await _create_user(db_session, "ada@example.com", "TestPassword123!", "Ada Lovelace")


@pytest_asyncio.fixture
async def second_user(db_session: AsyncSession) -> dict[str, Any]:
    """Create a second user for testing ownership scenarios."""
    return await _create_user(db_session, "grace@example.com", "SecondPassword123!", "Grace Hopper")
