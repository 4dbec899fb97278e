"""Pytest fixtures for OctoOps.

Every test gets its own in-memory SQLite database; the API client talks to
the app in-process with the session dependency pointed at that database.
"""

import os

# The engine in octoops.db.session is built at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import octoops.models  # noqa: F401
from octoops.config import get_settings
from octoops.db.base import Base
from octoops.db.session import get_db_session
from octoops.main import app


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enforce foreign keys like PostgreSQL does
    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory):
    """Session for service-level tests. Do not mix with ``client``."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def settings():
    """The cached settings object; patch attributes with monkeypatch."""
    return get_settings()


@pytest.fixture
async def owner(client):
    response = await client.post(
        "/api/auth/signup",
        json={"name": "Olivia Owner", "email": "olivia@acme.com", "projectName": "Octo"},
    )
    assert response.status_code == 201
    return response.json()["user"]


@pytest.fixture
async def project(client, owner):
    response = await client.post(
        "/api/projects",
        json={"name": "Octo", "ownerId": owner["id"], "description": "Main board"},
    )
    assert response.status_code == 201
    return response.json()
