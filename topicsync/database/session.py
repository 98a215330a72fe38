"""Database session and connection management."""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from topicsync.core.config import Settings
from topicsync.models.base import Base


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create the async engine, skipping pool sizing for SQLite."""
    options: dict[str, Any] = {"echo": settings.database_echo}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_pool_overflow,
            pool_timeout=settings.database_pool_timeout,
            pool_pre_ping=True,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides an async database session.

    Sessions come from the factory the running app was created with. The
    session is committed when the request handler returns and rolled back
    if it raises.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
