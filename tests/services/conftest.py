"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - db_manager patched so readiness probes see the test engine
    - Rate limiters start empty for every test
"""

import itertools

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import campus_api.infrastructure.database as db_module
from campus_api.api.dependencies import general_limiter, password_change_limiter
from campus_api.db.base import Base
from campus_api.infrastructure.database import DatabaseSessionManager, get_db
from campus_api.infrastructure.security import hash_password
from campus_api.main import app
from campus_api.models.user import User
from tests.services.accounts import DEFAULT_PASSWORD, auth_headers


_counter = itertools.count(1)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def reset_rate_limits():
    password_change_limiter.reset()
    general_limiter.reset()
    yield
    password_change_limiter.reset()
    general_limiter.reset()


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_user(test_db):
    """Factory: insert a user with a known password and return it."""
    async def _make(role: str = "user", password: str = DEFAULT_PASSWORD, **fields):
        n = next(_counter)
        fields.setdefault("username", f"student{n}")
        fields.setdefault("email", f"student{n}@example.com")
        fields.setdefault("fullname", f"Student {chr(ord('A') + n % 26)}")
        user = User(password_hash=hash_password(password), role=role, **fields)
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user
    return _make


@pytest.fixture
def auth():
    """auth(user) -> Authorization header dict."""
    return auth_headers
