"""Async engine and unit-of-work scope for the catalog database."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mlms.config import Settings
from mlms.config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

# Seconds a SQLite writer waits on a locked file before giving up
SQLITE_BUSY_TIMEOUT = 30


def _engine_options(db: DatabaseSettings) -> dict[str, Any]:
    """Translate DatabaseSettings into create_async_engine keyword arguments.

    Sized pools only exist for server databases. SQLite gets a longer lock
    wait and is allowed to hop threads, which aiosqlite needs.
    """
    options: dict[str, Any] = {"echo": db.echo, "pool_pre_ping": db.pool_pre_ping}
    if db.url.startswith("sqlite"):
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": SQLITE_BUSY_TIMEOUT,
        }
    else:
        options.update(
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_timeout=db.pool_timeout,
            pool_recycle=db.pool_recycle,
        )
    return options


def _turn_on_foreign_keys(dbapi_conn: Any, _record: Any) -> None:
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class Database:
    """Owns the engine and hands out sessions.

    Created once in the app lifespan and parked on ``app.state.db``; request
    handlers reach it through the get_session dependency.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        url = settings.database.url
        self._engine = create_async_engine(url, **_engine_options(settings.database))

        # Hey future me - SQLite ships with FK enforcement off, per connection. Without this
        # hook a half-finished artist delete could leave playlist_tracks rows pointing nowhere.
        if self.is_sqlite:
            event.listen(self._engine.sync_engine, "connect", _turn_on_foreign_keys)
            logger.debug("SQLite foreign key enforcement registered for %s", url)

        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    @property
    def is_sqlite(self) -> bool:
        return self.settings.database.url.startswith("sqlite")

    @asynccontextmanager
    async def session_scope(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on error.

        Services commit their own units of work. Whatever is still pending
        when the block ends cleanly gets committed here.
        """
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_tables(self) -> None:
        from mlms.infrastructure.persistence.models import Base

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    def get_pool_stats(self) -> dict[str, Any]:
        """Snapshot of the connection pool, shown by GET /health."""
        if self.is_sqlite:
            return {"pool_type": "sqlite", "sized": False}

        pool = self._engine.pool
        db = self.settings.database
        stats: dict[str, Any] = {"pool_type": type(pool).__name__, "sized": True}
        for name in ("size", "checkedin", "checkedout", "overflow"):
            counter = getattr(pool, name, None)
            stats[name] = counter() if callable(counter) else None
        stats["limits"] = {
            "max_overflow": db.max_overflow,
            "timeout": db.pool_timeout,
            "recycle": db.pool_recycle,
        }
        return stats
