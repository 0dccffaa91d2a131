"""
NoteVault Backend — Database Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   `Database` owns one async engine and session factory built from
       `Settings`. The app factory creates exactly one `Database` and stores
       it on `app.state.database`; `get_db_session` hands each request its
       own session.
Who:   Route handlers receive sessions through `Depends(get_db_session)`.
When:  Engine is created by `create_app()`; sessions are created per request.

Connection Pooling:
    PostgreSQL: pool_size / max_overflow / pre_ping from settings,
                pool_recycle=3600 to drop long-lived connections.
    SQLite:     a single StaticPool connection (tests, in-memory databases).
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from notevault.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share one metadata object,
    which Alembic and `Database.create_all()` read.
    """
    pass


def _engine_options(settings: Settings) -> Dict[str, Any]:
    """Pool options for the configured backend."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if settings.is_sqlite:
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


class Database:
    """
    Engine and session factory for one application instance.

    The storage connection pool is shared by all concurrent requests; the
    application holds no locks of its own and relies on the database for
    per-row atomicity and unique constraints.
    """

    def __init__(self, settings: Settings):
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url, **_engine_options(settings)
        )
        # expire_on_commit=False: ORM objects stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create every table known to `Base.metadata` (tests, local dev)."""
        # Model modules must be imported so their tables are registered.
        from notevault.models import note, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Run `SELECT 1`; used by the health check."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", type(e).__name__)
            return False

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the application's `Database`
        2. Yields it to the route handler; services commit their own writes
        3. On error: rolls back so no partial write survives
        4. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
