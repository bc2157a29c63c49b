"""Async SQLAlchemy engine, sessions and the transaction helper.

The engine is built from settings.database_url on first session request;
with no URL configured, sessions are unavailable but repositories can
still be used with a caller-provided AsyncSession (tests, scripts).
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from service_layer.core.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Populated by _ensure_engine().
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Declarative base for office-scoped ORM models."""


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use (when DATABASE_URL is set)."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    if not settings.database_url:
        return
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine() -> AsyncEngine | None:
    """Return the engine, creating it when DATABASE_URL is set; None otherwise."""
    _ensure_engine()
    return engine


def _session_factory() -> async_sessionmaker[AsyncSession]:
    _ensure_engine()
    if AsyncSessionLocal is None:
        logger.error("SQL database not configured: set DATABASE_URL")
        raise RuntimeError("DATABASE_URL is not configured")
    return AsyncSessionLocal


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency for read operations. Does not commit."""
    async with _session_factory()() as session:
        yield session


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Database session dependency for writes: commits on success, rolls back on exception."""
    async with _session_factory()() as session:
        async with session.begin():
            yield session


async def run_in_transaction(
    session: AsyncSession, operation: Callable[[], Awaitable[T]]
) -> T:
    """Await operation inside a transaction on session.

    Opens a SAVEPOINT when the session is already in a transaction, so the
    helper nests inside get_db_transactional.
    """
    if session.in_transaction():
        async with session.begin_nested():
            return await operation()
    async with session.begin():
        return await operation()


async def dispose_engine() -> None:
    """Dispose the engine (app shutdown)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        engine = None
        AsyncSessionLocal = None
