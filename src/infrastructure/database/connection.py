# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Async engine and session lifecycle for the academic records store."""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.infrastructure.database.models.base import Base

if TYPE_CHECKING:
    from src.core.config.settings import Settings

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

_NOT_INITIALIZED = "Database not initialized. Call init_database() first."


class DatabaseError(Exception):
    """Engine or session failure, optionally wrapping the driver error."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


async def init_database(settings: "Settings") -> None:
    """Create the engine and sessionmaker from ``settings.database``.

    Raises:
        DatabaseError: If the engine cannot be created.
    """
    global _engine, _sessionmaker

    url = settings.database.url
    options: dict[str, Any] = {"echo": settings.debug}
    # sqlite's async pool takes no sizing arguments
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.database.pool_size,
            max_overflow=settings.database.max_overflow,
            pool_pre_ping=True,
        )

    try:
        _engine = create_async_engine(url, **options)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize database connection", e) from e
    _sessionmaker = async_sessionmaker(bind=_engine, expire_on_commit=False, autoflush=False)


async def close_database() -> None:
    """Dispose of the engine, if any."""
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Open a session; commit on clean exit, roll back on error.

    Raises:
        DatabaseError: If the database is not initialized or a SQLAlchemy
            error escapes the block.
    """
    if _sessionmaker is None:
        raise DatabaseError(_NOT_INITIALIZED)

    async with _sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            await session.rollback()
            raise


async def create_schema() -> None:
    """Create any academic tables that are missing.

    Raises:
        DatabaseError: If the database is not initialized or the DDL fails.
    """
    if _engine is None:
        raise DatabaseError(_NOT_INITIALIZED)

    try:
        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create schema", e) from e
