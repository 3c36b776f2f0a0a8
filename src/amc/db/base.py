"""Database connection and session management."""

from typing import Any, AsyncGenerator, Dict, Optional

from amc.config import get_settings
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()

# Global engine and sessionmaker
engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


async def init_db() -> None:
    """Initialize database connection."""
    global engine, AsyncSessionLocal

    settings = get_settings()

    engine_args: Dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": settings.debug,
    }

    # SQLite (used in tests) doesn't support pool_size/max_overflow
    if settings.db_url.startswith("sqlite"):
        # An in-memory database only lives as long as its single connection
        if ":memory:" in settings.db_url:
            engine_args["poolclass"] = StaticPool
    else:
        engine_args["pool_size"] = settings.db_pool_size
        engine_args["max_overflow"] = settings.db_max_overflow

    engine = create_async_engine(
        settings.db_url,
        **engine_args,
    )

    AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # For SQLite used in tests, create tables automatically
    if settings.db_url.startswith("sqlite"):
        # Register every mapped table before create_all
        import amc.db.models  # noqa: F401
        import amc.models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connection."""
    global engine

    if engine is not None:
        await engine.dispose()
        engine = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for dependency injection."""
    if AsyncSessionLocal is None:
        await init_db()

    assert AsyncSessionLocal is not None

    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
