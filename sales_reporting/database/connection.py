"""
Database Connection Management

Async database engine and session management with SQLAlchemy 2.0.
Implements engine initialization, health checks, and graceful shutdown.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from sales_reporting.config import get_settings
from sales_reporting.database.models import Base

logger = structlog.get_logger(__name__)

# Global engine and session factory
_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """
    Build an async engine for the given URL.

    In-memory SQLite must share a single connection or every session would
    see an empty database.
    """
    engine_config = {
        "echo": echo,
        "pool_pre_ping": True,
    }

    if url.startswith("sqlite") and ":memory:" in url:
        engine_config.update({
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        })
    else:
        # asyncpg and aiosqlite manage their own connections
        engine_config.update({"poolclass": NullPool})

    return create_async_engine(url, **engine_config)


async def init_database(url: Optional[str] = None) -> AsyncEngine:
    """
    Initialize the database engine.

    Args:
        url: Override the configured database URL

    Returns:
        AsyncEngine: The initialized database engine
    """
    global _engine, _async_session_factory

    if _engine is not None:
        logger.warning("Database already initialized")
        return _engine

    settings = get_settings()
    database_url = url or settings.database.url

    _engine = create_engine_for_url(database_url, echo=settings.database.echo)

    _async_session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    try:
        async with _engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info(
            "Database connection established",
            backend=_engine.dialect.name,
            url=settings.database.safe_url if url is None else "override",
        )
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        raise

    return _engine


async def close_database() -> None:
    """
    Close the database engine.

    Gracefully closes all open connections.
    """
    global _engine, _async_session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connection closed")


def get_engine() -> AsyncEngine:
    """
    Get the database engine.

    Returns:
        AsyncEngine: The active database engine

    Raises:
        RuntimeError: If database is not initialized
    """
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _engine


async def create_schema(engine: Optional[AsyncEngine] = None, drop_existing: bool = False) -> None:
    """Create (optionally recreate) every table of the sample schema."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        if drop_existing:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema created", tables=len(Base.metadata.tables), dropped=drop_existing)


@asynccontextmanager
async def get_db(read_only: bool = False) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.

    Context manager that provides a database session and handles
    commit/rollback/close automatically. Read-only sessions are always
    rolled back so a report can never leave changes behind.

    Yields:
        AsyncSession: Database session

    Example:
        async with get_db(read_only=True) as db:
            result = await db.execute(query)
    """
    if _async_session_factory is None:
        logger.error("Database not initialized when get_db() called")
        raise RuntimeError("Database not initialized. Call init_database() first.")

    session = _async_session_factory()
    try:
        yield session
        if read_only:
            await session.rollback()
        else:
            await session.commit()
    except Exception as e:
        logger.error("Database session error, rolling back", error=str(e), error_type=type(e).__name__)
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db_dependency() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for read-only report sessions.

    Example:
        @router.get("/reports/{name}")
        async def run(name: str, db: AsyncSession = Depends(get_db_dependency)):
            ...
    """
    async with get_db(read_only=True) as session:
        yield session


async def check_database_health() -> dict:
    """
    Check database health status.

    Returns:
        dict: Health status with latency information
    """
    try:
        start = time.perf_counter()
        async with get_db(read_only=True) as db:
            await db.execute(text("SELECT 1"))
        latency_ms = (time.perf_counter() - start) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(latency_ms, 2),
            "backend": get_engine().dialect.name,
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
        }
