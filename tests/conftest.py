"""
Shared test fixtures for the Attendance Reconciler test suite.

Every test gets its own in-memory SQLite database (aiosqlite + AsyncSession)
and the ``get_db`` dependency is pointed at it.
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["COLLECTION_SECTOR"] = "collection"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from reconciler.api.v1.deps import get_db
from reconciler.db.base import Base
from reconciler.db.storage import SqlAlchemyStorage
from reconciler.main import app


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create all tables on a fresh engine and route the app to it."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(db_session: AsyncSession) -> SqlAlchemyStorage:
    return SqlAlchemyStorage(db_session)
