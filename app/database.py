"""Async database engine and session management.

Uses SQLAlchemy 2.0 async with asyncpg driver.
Graceful degradation: if DATABASE_URL is unset or PostgreSQL is unavailable,
the app continues without history persistence.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings

logger = logging.getLogger(__name__)

engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None

if settings.has_database:
    engine = create_async_engine(
        settings.database_url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db() -> bool:
    """Create tables if they don't exist. Returns True on success."""
    from app.models import Base

    if engine is None:
        logger.info("DATABASE_URL not set — search history disabled")
        return False

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
        return True
    except Exception as e:
        logger.warning("Database unavailable — continuing without persistence: %s", str(e)[:200])
        return False


async def close_db():
    """Dispose engine connections on shutdown."""
    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")
