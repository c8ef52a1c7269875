"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and the FastAPI
dependency for per-request session injection.

Dependencies: sqlalchemy, gyanmitra.configs
System role: Database connection lifecycle management
"""

import logging
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from gyanmitra.boundary.db.base import Base
from gyanmitra.configs import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the async engine once per process.

    Pool sizing applies to server databases only; SQLite URLs get the
    driver's default pool. pool_pre_ping=True detects stale connections.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    db_config = get_settings().database

    if db_config.is_sqlite:
        return create_async_engine(db_config.async_database_url, echo=db_config.echo_sql)

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Create the async session factory.

    autoflush=False and expire_on_commit=False keep transaction control
    explicit and leave loaded aggregates usable after commit.
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Yields:
        AsyncSession: Session scoped to the request lifetime

    Usage:
        @router.get("/conversation/{id}")
        async def get_conversation(id: UUID, db: AsyncSession = Depends(get_async_db)):
            ...
    """
    session_factory = get_async_session_factory()
    async with session_factory() as session:
        yield session


async def init_models(engine: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet (development start-up)."""
    # Registers every mapped class on Base.metadata.
    from gyanmitra.boundary.db import models  # noqa: F401

    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"url": engine.url.render_as_string()})


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
        get_async_engine.cache_clear()
        get_async_session_factory.cache_clear()
