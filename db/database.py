"""
Snapshot Soil — Where the Windowsill Sleeps

Async SQLAlchemy setup, SQLite via aiosqlite by default. Each app builds its
own engine so tests can run against an isolated in-memory database.
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from models.db_models import Base

logger = logging.getLogger("windowsill.soil")

DATABASE_URL = os.getenv("WINDOWSILL_DATABASE_URL", "sqlite+aiosqlite:///./windowsill.db")


def create_engine(url: str | None = None) -> AsyncEngine:
    url = url or DATABASE_URL
    engine = create_async_engine(url, echo=False)

    if url.startswith("sqlite"):
        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            """Enable WAL mode and set busy timeout for SQLite."""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create the snapshot table if it does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Snapshot store ready")


async def shutdown_db(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("Snapshot store connection closed")
