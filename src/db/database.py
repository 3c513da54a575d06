from __future__ import annotations

from collections.abc import AsyncGenerator
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

if not settings.database:
    raise RuntimeError("Database configuration not initialized")

# Capture non-None database config for type checkers
DB_CFG = settings.database
assert DB_CFG is not None


def _to_async_dsn(url: str) -> str:
    if "+asyncpg" in url or "+aiosqlite" in url:
        return url
    if url.startswith("postgresql+psycopg2://"):
        return url.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


ASYNC_DATABASE_URL = _to_async_dsn(DB_CFG.url)

# Lazy engine/sessionmaker to avoid creating pools at import time.
# Public alias for tests: unit tests monkeypatch `db.database.engine`.
engine: AsyncEngine | None = None
_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def _engine_options() -> dict:
    options: dict = {"echo": DB_CFG.echo}
    # SQLite dialects pick their own pool class; sizing arguments do not apply
    if not DB_CFG.is_sqlite:
        options.update(
            pool_size=DB_CFG.pool_size,
            max_overflow=DB_CFG.max_overflow,
            pool_pre_ping=DB_CFG.pool_pre_ping,
            pool_timeout=DB_CFG.pool_timeout,
            pool_recycle=3600,
        )
    return options


def get_engine() -> AsyncEngine:
    global _engine
    # If a test has monkeypatched the public `engine`, use it.
    if engine is not None:
        return engine
    if _engine is None:
        _engine = create_async_engine(ASYNC_DATABASE_URL, **_engine_options())
        logger.debug("AsyncEngine created")
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    global _session_maker
    if _session_maker is None:
        _session_maker = async_sessionmaker(
            bind=get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )
        logger.debug("Async sessionmaker created")
    return _session_maker


async def get_db() -> AsyncGenerator[AsyncSession]:
    async with get_session_maker()() as session:
        try:
            logger.debug("Async database session created")
            yield session
        except Exception as e:
            await session.rollback()
            logger.error("Error in async DB session: %s", e)
            raise
        finally:
            logger.debug("Async database session closed")


async def create_all() -> None:
    """Create every table registered on Base that does not exist yet."""
    # Models must be imported so their tables are registered
    import db.models.post  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def check_db_connection() -> bool:
    """Run ``SELECT 1`` on the engine; failures are logged and reported as False."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database connection check failed: %s", e)
        return False
    logger.info("Database connection is healthy")
    return True


async def close_db_connections() -> None:
    global engine, _engine, _session_maker
    try:
        for current in (engine, _engine):
            if current is not None:
                await current.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error("Error closing database connections: %s", e)
    finally:
        engine = None
        _engine = None
        _session_maker = None


async def get_db_info() -> dict:
    """Describe the configured backend for the health endpoint."""
    try:
        current = get_engine()
        return {"status": "healthy", "backend": current.dialect.name}
    except Exception as e:
        logger.error("Error getting database info: %s", e)
        return {"status": "error", "message": str(e)}
