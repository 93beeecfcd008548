"""
Database Configuration

Async SQLAlchemy engine, session factory and the declarative Base
shared by every model.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from hr_portal.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a database session.

    The session is rolled back if the request handler raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Verify the database connection on startup.

    When ``AUTO_CREATE_TABLES`` is enabled (local development only) the
    schema is created from the models instead of through Alembic.
    """
    # Import models so they register on Base.metadata
    from hr_portal.modules import models  # noqa: F401

    async with engine.begin() as conn:
        if settings.auto_create_tables and not settings.is_production:
            logger.warning("AUTO_CREATE_TABLES enabled, creating schema from models")
            await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine connection pool."""
    await engine.dispose()
