# ABOUTME: Async engine and session lifecycle for the fact store.
# ABOUTME: Exposes a lazily built Database plus session helpers for the CLI and FastAPI.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from newsletter_analytics.config import Settings, get_settings
from newsletter_analytics.db.models import Base

log = structlog.get_logger()


class Database:
    """Owns one async engine and its session factory.

    The engine is created on first use so importing the package never opens
    connections.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.database_url,
                pool_size=self.settings.db_pool_size,
                max_overflow=self.settings.db_pool_max_overflow,
                pool_pre_ping=True,
                echo=self.settings.log_level == "DEBUG",
            )
            log.debug("db_engine_created", host=self.settings.db_host, db=self.settings.db_name)
        return self._engine

    @property
    def sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._sessions is None:
            self._sessions = async_sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
        return self._sessions

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Session that commits on success and rolls back on any error."""
        async with self.sessions() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                log.debug("db_session_rollback")
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessions = None


_database: Database | None = None


def get_database() -> Database:
    """Get the process-wide Database, creating it from settings on first call."""
    global _database
    if _database is None:
        _database = Database(get_settings())
    return _database


def get_session():
    """Context manager for a committed-or-rolled-back session.

    Usage:
        async with get_session() as session:
            result = await session.execute(query)
    """
    return get_database().session()


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""
    async with get_session() as session:
        yield session


async def init_db() -> None:
    """Create missing tables. Production schemas are managed by Alembic."""
    await get_database().create_schema()


async def close_db() -> None:
    """Dispose the engine and forget it so the next use reconnects."""
    global _database
    if _database is not None:
        await _database.dispose()
        _database = None
