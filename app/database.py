"""
Database engine, session management, and base model class.

This module sets up SQLAlchemy 2.0 with async support. Key components:

  - Base: Declarative base class that all ORM models inherit from
  - Database: Owns the async engine (connection pool) and the session factory
  - get_db(): FastAPI dependency that provides a session per request

Architecture note:
  We use async SQLAlchemy (with aiosqlite for SQLite) so the API can handle
  concurrent requests without blocking. When migrating to PostgreSQL, only
  the DATABASE_URL needs to change (to use the asyncpg driver).

  The Database object is created by the application factory and stored on
  app.state. Nothing here is a module-level singleton, so each app instance
  (and each test) owns its own connection pool.

Session lifecycle:
  Each API request gets its own session via get_db(). Routes that change
  data call `await db.commit()` before returning, so a failed commit is
  reported to the caller instead of happening after the response went out.
  Any exception rolls the session back, so every balance mutation made
  during a request is one atomic unit: either all of it persists or none
  of it does.

SQLite transactions:
  The sqlite3 driver only emits BEGIN right before the first write, so two
  requests could both read a balance before either takes the write lock.
  For SQLite we switch off the driver's own transaction handling and begin
  every transaction with BEGIN IMMEDIATE, which takes the write lock up
  front. Concurrent writers then queue on the lock (up to the driver's busy
  timeout) and each one reads what the previous one committed.
"""

import os

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Provides metadata tracking (used by create_all and by migrations) and
    the common declarative mapping features.
    """
    pass


def _begin_immediate_on_sqlite(engine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """
    Connection pool and session factory for one application instance.

    Args:
        url: SQLAlchemy async database URL.
        echo: Log every SQL statement (enabled by DEBUG).
        isolation_level: Optional transaction isolation level passed to the
                         engine, e.g. "SERIALIZABLE".
        **engine_kwargs: Extra create_async_engine() arguments (tests pass
                         poolclass=StaticPool for in-memory SQLite).
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        isolation_level: str | None = None,
        **engine_kwargs,
    ):
        if isolation_level:
            engine_kwargs["isolation_level"] = isolation_level

        self.engine = create_async_engine(url, echo=echo, **engine_kwargs)
        if self.engine.url.get_backend_name() == "sqlite":
            _begin_immediate_on_sqlite(self.engine)

        # expire_on_commit=False prevents lazy-load errors after commit:
        # without it, reading attributes on a committed object would trigger
        # a synchronous DB call, which fails in async context.
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create all tables that don't exist yet."""
        # SQLite won't create the directory holding its database file
        url = self.engine.url
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            os.makedirs(os.path.dirname(os.path.abspath(url.database)), exist_ok=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


async def get_db(request: Request):
    """
    FastAPI dependency that provides a database session.

    Usage in a route:
        @router.post("/items")
        async def create_item(db: AsyncSession = Depends(get_db)):
            ...
            await db.commit()

    Nothing is committed here: FastAPI runs the code after `yield` once the
    response has started, too late to turn a failed commit into an error
    response. Routes that write commit explicitly. On any exception
    (including domain errors such as InsufficientFundsError) the session is
    rolled back; uncommitted work is discarded when the session closes.
    """
    database: Database = request.app.state.database
    async with database.sessionmaker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
