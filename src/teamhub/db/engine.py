"""Async SQLAlchemy engine and session factory.

SQLAlchemy 2.0 async mode: one engine with connection pooling, one
AsyncSession per request handed out through FastAPI dependency injection.
SQLite (the default, via aiosqlite) and Postgres (asyncpg) are both supported.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from teamhub.config import settings


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine for `url`.

    SQLite connections get foreign keys switched on so the declared
    ON DELETE CASCADE rules actually fire.
    """
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=settings.debug, **kwargs)

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    # Connection pool: min 5, max 20 connections.
    return create_async_engine(
        url,
        echo=settings.debug,
        pool_size=5,
        max_overflow=15,
        **kwargs,
    )


engine = build_engine(settings.database_url)

# Session factory: each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create all tables that don't exist yet."""
    from teamhub.db.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncSession:
    """FastAPI dependency: yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
