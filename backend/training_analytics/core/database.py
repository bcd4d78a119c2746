"""
Database engine and session management.

The engine is created lazily so the service still starts (and serves
/api/health) when DATABASE_URL is not configured.
"""
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from training_analytics.core.config import settings
from training_analytics.core.logging import get_logger

logger = get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


class Base(DeclarativeBase):
    """Declarative base for ORM models."""


def get_engine() -> AsyncEngine:
    """Create the engine on first use."""
    global _engine, _session_factory
    if _engine is None:
        _engine = create_async_engine(settings.require_database_url(), pool_pre_ping=True)
        _session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _engine


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency function to get DB session."""
    get_engine()
    async with _session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Check connectivity at startup. The Clubs table is managed externally."""
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL not configured, club lookups will fail")
        return

    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database reachable")


async def close_db() -> None:
    """Dispose of the engine on shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
