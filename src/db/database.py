from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config import get_settings
from src.db.models.base import Base

settings = get_settings()

_async_engine: AsyncEngine | None = None
_AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _get_async_url(url: str) -> str:
    """Convert sync database URLs to their async driver equivalents when needed."""
    if url.startswith("postgresql+asyncpg://"):
        return url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://") and not url.startswith("sqlite+aiosqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def configure_engine(database_url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """
    (Re)create the async engine and session factory.

    Called lazily on first use with the configured settings; the CLI and tests
    call it explicitly to point the service at another database.
    """
    global _async_engine, _AsyncSessionLocal
    url = _get_async_url(database_url or settings.database_url)
    _async_engine = create_async_engine(
        url,
        echo=settings.database_echo if echo is None else echo,
        pool_pre_ping=True,
    )
    _AsyncSessionLocal = async_sessionmaker(
        bind=_async_engine,
        class_=AsyncSession,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    return _async_engine


def get_engine() -> AsyncEngine:
    """Get or create the async engine (lazy initialization)."""
    if _async_engine is None:
        configure_engine()
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the async session factory."""
    if _AsyncSessionLocal is None:
        configure_engine()
    return _AsyncSessionLocal


async def init_db() -> None:
    """Initialize database tables."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")


async def dispose_engine() -> None:
    """Close pooled connections (application shutdown)."""
    global _async_engine, _AsyncSessionLocal
    if _async_engine is not None:
        await _async_engine.dispose()
    _async_engine = None
    _AsyncSessionLocal = None


async def check_database_health() -> tuple[str, str | None]:
    """
    Check database connectivity.

    Returns:
        Tuple of (status, error_message). Status is "ok" or "error".
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return "ok", None
    except (SQLAlchemyError, OSError) as e:  # asyncpg reports refused connections as OSError
        return "error", str(e)


@asynccontextmanager
async def async_session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async transactional scope around a series of operations."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:  # Intentionally broad - rollback on any error before re-raising
            await session.rollback()
            raise
