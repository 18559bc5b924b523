"""Async SQLAlchemy engine and session factory for the progress store.

When DATABASE_URL is configured, provides:
- async engine for PostgreSQL via asyncpg
- request-scoped sessions that commit on success, roll back on error
- a connectivity check for the readiness probe
- FastAPI lifespan hook for startup/shutdown

When DATABASE_URL is None, all exports are None and progress lives in
the in-memory repository.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from learnpath.core.config import SETTINGS

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all table models."""


if SETTINGS.database_url:
    engine = create_async_engine(
        SETTINGS.database_url,
        echo=SETTINGS.is_dev,
        pool_size=5,
        max_overflow=10,
    )
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
else:
    engine = None
    async_session_factory = None


async def get_optional_session() -> AsyncGenerator[AsyncSession | None, None]:
    """FastAPI dependency that yields a request-scoped async session.

    Yields None when no database is configured.  One completion event is
    one read-modify-write inside this session; storage errors propagate
    to the caller after rollback.
    """
    if async_session_factory is None:
        yield None
        return
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping() -> bool:
    """Return True when the progress store answers a trivial query."""
    if engine is None:
        return True
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Progress store unreachable")
        return False
    return True


@asynccontextmanager
async def lifespan_db():
    if engine is None:
        logger.info("No DATABASE_URL configured, progress kept in memory")
        yield
        return

    logger.info("Progress store engine created: %s", engine.url)
    yield
    await engine.dispose()
    logger.info("Progress store engine disposed")
