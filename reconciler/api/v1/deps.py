"""
FastAPI dependencies: database session and storage.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.db.session import async_session_factory
from reconciler.db.storage import SqlAlchemyStorage


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Storage ─────────────────────────────────────────────────────────
async def get_storage(db: AsyncSession = Depends(get_db)) -> SqlAlchemyStorage:
    """Storage collaborator bound to the request's session."""
    return SqlAlchemyStorage(db)
