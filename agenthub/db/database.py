"""Database connection and session management"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from agenthub.config import settings
from agenthub.errors import MigrationError
from agenthub.db.models import Base

logger = logging.getLogger(__name__)


def build_engine(
    database_url: str,
    pool_size: int,
    max_overflow: int,
    echo: bool = False,
) -> AsyncEngine:
    """Create an async engine with a bounded pool for the given URL."""
    if database_url.startswith("sqlite"):
        # SQLite configuration for development and tests
        return create_async_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
    )


# Server engine: long-running process
engine = build_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    echo=settings.debug,
)

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency for getting database sessions"""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def script_engine(database_url: Optional[str] = None) -> AsyncIterator[AsyncEngine]:
    """Short-lived engine for admin scripts, capped at script_pool_size connections."""
    script = build_engine(
        database_url or settings.database_url,
        pool_size=settings.script_pool_size,
        max_overflow=0,
        echo=settings.debug,
    )
    try:
        yield script
    finally:
        await script.dispose()


def session_maker_for(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def init_db(bind: Optional[AsyncEngine] = None):
    """Create database tables and bring existing ones up to date."""
    from agenthub.db.migrations import SCHEMA_UPGRADES, SETUP_DB, run_migration

    bind = bind or engine
    # vector extension first, the knowledge_base table depends on it
    setup = await run_migration(bind, SETUP_DB)
    if not setup.ok:
        raise MigrationError(f"Database setup failed: {setup.failed[0].error}")

    # create_all only creates missing tables, older tables may lack columns
    report = await run_migration(bind, SCHEMA_UPGRADES, stop_on_error=False)
    for result in report.failed:
        logger.warning(f"Schema upgrade step '{result.name}' failed: {result.error}")


async def drop_db(bind: Optional[AsyncEngine] = None):
    """Drop all database tables (for testing)"""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
