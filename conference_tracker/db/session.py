"""Database engine, session scopes and store creation"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from conference_tracker.db.base import Base

logger = structlog.get_logger()


class Database:
    """Async engine plus the session factory bound to it"""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        engine_kwargs: dict = {"echo": echo}
        if url.startswith("sqlite"):
            # One pinned connection keeps a named in-memory store alive for the engine's lifetime
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session_scope(self) -> AsyncIterator[AsyncSession]:
        """Session committed on success, rolled back on error, always closed"""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        await self.engine.dispose()


def _create_missing_tables(session: Session) -> bool:
    connection = session.connection()
    existing = set(inspect(connection).get_table_names())
    missing = [table for table in Base.metadata.sorted_tables if table.name not in existing]
    if missing:
        Base.metadata.create_all(connection, tables=missing)
    session.commit()
    return bool(missing)


async def ensure_created(database: Database) -> bool:
    """
    Create the store's tables if they do not exist yet.

    Idempotent: returns True when something was created, False when the
    store was already complete. The session (and its connection) is released
    on every exit path.
    """
    async with database.session_factory() as session:
        created = await session.run_sync(_create_missing_tables)

    logger.info("Database store checked", url=database.url, created=created)
    return created
