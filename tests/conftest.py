"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

TEST_SECRET = "test-secret-key-for-linkarray-api-tests"

# Set test environment variables BEFORE importing anything that loads settings
os.environ["ENVIRONMENT"] = "development"
os.environ["JWT_SECRET"] = TEST_SECRET
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "warning"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from linkarray_api.config import settings

assert settings.jwt_secret == TEST_SECRET, "Test setup failed: jwt_secret not loaded"

VALID_PASSWORD = "secret1!"


class FrozenClock:
    """Controllable clock returning a fixed aware UTC datetime."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at 2024-03-15 12:00:00 UTC."""
    return FrozenClock(datetime(2024, 3, 15, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def authenticator(clock):
    """Session authenticator signing with the test secret and frozen clock."""
    from linkarray_api.core import AuthConfig, SessionAuthenticator

    return SessionAuthenticator(AuthConfig.from_settings(settings), clock=clock)


@pytest_asyncio.fixture(scope="function")
async def test_db():
    """Create a test database for each test."""
    from linkarray_api.storage.database import Database

    with tempfile.TemporaryDirectory() as tmp_dir:
        db = Database(Path(tmp_dir) / "test.db")
        await db.connect()
        yield db
        await db.disconnect()


async def _create_user(
    db,
    username: str = "alice",
    role: str = "user",
    created_at: datetime | None = None,
    password: str = VALID_PASSWORD,
) -> dict:
    """Insert a user directly through the storage layer."""
    from linkarray_api.core import hash_password

    return await db.create_user(
        name=username.capitalize(),
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password, rounds=4),
        role=role,
        created_at=created_at,
    )


@pytest.fixture
def make_user(test_db):
    """Factory inserting users into the test database."""

    async def factory(username: str = "alice", **kwargs) -> dict:
        return await _create_user(test_db, username=username, **kwargs)

    return factory


@pytest.fixture
def login_as(make_user, authenticator):
    """Factory creating a user and returning it with bearer auth headers."""

    async def factory(username: str = "alice", role: str = "user") -> tuple[dict, dict]:
        user = await make_user(username, role=role)
        token = authenticator.issue(user["id"])
        return user, {"Authorization": f"Bearer {token}"}

    return factory


@pytest_asyncio.fixture(scope="function")
async def client(test_db, clock):
    """Create test client backed by the test database and frozen clock."""
    from fastapi import FastAPI

    import linkarray_api.storage.database as db_module
    from linkarray_api.api import (
        admin_router,
        auth_router,
        health_router,
        links_router,
        register_exception_handlers,
        users_router,
    )
    from linkarray_api.api.deps import get_clock
    from linkarray_api.middleware import ApiKeyMiddleware, RequestLoggingMiddleware
    from linkarray_api.storage.database import get_db

    test_app = FastAPI(title="Test App")
    register_exception_handlers(test_app)
    test_app.add_middleware(ApiKeyMiddleware)
    test_app.add_middleware(RequestLoggingMiddleware)

    test_app.include_router(health_router)
    test_app.include_router(auth_router)
    test_app.include_router(users_router)
    test_app.include_router(links_router)
    test_app.include_router(admin_router)

    original_db = db_module._db
    db_module._db = test_db

    test_app.dependency_overrides[get_db] = lambda: test_db
    test_app.dependency_overrides[get_clock] = lambda: clock

    try:
        async with AsyncClient(
            transport=ASGITransport(app=test_app),
            base_url="http://test",
            timeout=5.0,
        ) as test_client:
            yield test_client
    finally:
        test_app.dependency_overrides.clear()
        db_module._db = original_db
