"""Shared fixtures: in-memory fake store and a throwaway SQLite database."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fitledger.db.base import Base
from fitledger.db.session import get_db
from fitledger.main import app
from fitledger.models import *  # noqa: F401, F403 - register all models
from tests.fakes import FakeRecordStore


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
async def db():
    """AsyncSession on an in-memory SQLite database with the full schema."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with maker() as session:
        yield session
    await engine.dispose()


@pytest.fixture
async def client(db):
    """HTTP client against the app with get_db bound to the SQLite session."""

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
