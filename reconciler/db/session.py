"""
Async SQLAlchemy engine & session factory.

PostgreSQL (asyncpg) in production; the pool options are skipped for
SQLite, which the test suite runs against.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from reconciler.core.config import settings


def _engine_options(url: str) -> dict:
    options: dict = {"echo": False, "pool_pre_ping": True}
    if url.startswith("postgresql"):
        options.update(pool_size=20, max_overflow=10, pool_recycle=300)
    elif url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Processing commits one day at a time; rows must stay readable after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
