"""
Headlines Backend — Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   A `Database` object owns one async engine (with its connection pool)
       and a session factory. The application factory builds it, stores it on
       `app.state.db`, and disposes it on shutdown.
Who:   Route handlers receive sessions via `get_db_session`; the scrape
       ingestor opens its own short sessions through `Database.session()`.

Why an object instead of a module-level engine:
    Every app instance (and every test) gets its own pool pointed at its own
    URL. Nothing connects at import time.

Connection Pooling Strategy:
    pool_size=20:     Persistent connections for normal load
    max_overflow=10:  Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:    Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from headlines.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they register with one shared
    metadata object (used by Alembic and by `Database.create_tables`).
    """
    pass


class Database:
    """
    The store client shared by every request of one application.

    Attributes:
        engine:           Async engine managing the connection pool
        session_factory:  Creates AsyncSession instances bound to the engine
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            # SQL logging is noisy; only useful during development
            echo=settings.log_level == "DEBUG",
        )
        # expire_on_commit=False: records stay readable after commit, which the
        # stores rely on when serializing freshly written rows
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Unit of work: commit on success, roll back on error, always close.

        Used directly by the scrape ingestor (one unit per listing) and
        indirectly by every request through `get_db_session`.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_tables(self) -> None:
        """Create any missing tables for the registered models."""
        # Models must be imported so they register with Base.metadata
        from headlines.models import article, note  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        """Round-trip a trivial query. Raises on connectivity failure."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


# ── Dependencies ──────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """FastAPI dependency returning the app's Database."""
    return request.app.state.db


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a unit of work on the app's Database
        2. Yields the session to the route handler
        3. On success: commits; on error: rolls back and re-raises

    Example usage in a route:
        @router.get("/articles")
        async def list_articles(db: AsyncSession = Depends(get_db_session)):
            return await article_store.list_all(db)
    """
    async with get_database(request).session() as session:
        yield session
