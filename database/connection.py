"""
Database Connection

Lazily created async engine and the unit-of-work scope used by the RFP store.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
    AsyncEngine
)
from sqlalchemy.pool import NullPool

from config.settings import settings

logger = logging.getLogger("rfp_manager.database")

# Created on first use so importing the models never opens a connection
_engine: Optional[AsyncEngine] = None
_sessions: Optional[async_sessionmaker] = None


def get_engine() -> AsyncEngine:
    """Engine for `settings.database_url`."""
    global _engine, _sessions

    if _engine is None:
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            poolclass=NullPool,
        )
        _sessions = async_sessionmaker(_engine, expire_on_commit=False, autoflush=False)
        logger.info(f"Database engine created ({_engine.url.get_backend_name()})")

    return _engine


@asynccontextmanager
async def get_db_context() -> AsyncIterator[AsyncSession]:
    """
    One unit of work.

    Commits when the block exits cleanly; rolls back and re-raises
    otherwise. Loaded objects stay readable after the commit.

    Usage:
        async with get_db_context() as db:
            db.add(requirement)
    """
    get_engine()
    async with _sessions() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def _run_schema(operation: str):
    from database.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(getattr(Base.metadata, operation))


async def init_db():
    """Create the RFP tables that do not exist yet."""
    await _run_schema("create_all")


async def drop_db():
    """Drop every RFP table."""
    await _run_schema("drop_all")


async def close_db():
    """Dispose of the engine; the next database call creates a new one."""
    global _engine, _sessions

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessions = None
