"""
Database Configuration

Async SQLAlchemy 2.0 setup with the asyncpg driver for PostgreSQL.
"""

import ssl
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models should inherit from this class.
    """
    pass


# Module-level engine instance (lazily initialized)
_engine: Optional[AsyncEngine] = None
_async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def normalize_database_url(url: str) -> tuple[str, Dict[str, Any]]:
    """
    Split a libpq-style URL into an asyncpg URL and connect args.

    asyncpg rejects ``sslmode``/``channel_binding`` query parameters, so they
    are stripped and ``sslmode=require`` is translated into an SSL context.

    Args:
        url: Database URL from configuration.

    Returns:
        Tuple of (url_without_query, connect_args).
    """
    connect_args: Dict[str, Any] = {}
    if "?" not in url:
        return url, connect_args

    base_url, query = url.split("?", 1)
    params = dict(
        part.split("=", 1) for part in query.split("&") if "=" in part
    )
    if params.get("sslmode") in ("require", "verify-ca", "verify-full"):
        ssl_context = ssl.create_default_context()
        if params["sslmode"] == "require":
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ssl_context

    return base_url, connect_args


def get_engine() -> AsyncEngine:
    """
    Get or create the async engine.

    Lazy initialization to avoid import-time database connection issues.
    """
    global _engine
    if _engine is None:
        from app.core.config import settings

        db_url, connect_args = normalize_database_url(settings.DATABASE_URL)

        _engine = create_async_engine(
            db_url,
            echo=settings.is_development,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            connect_args=connect_args,
        )
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get or create the session maker."""
    global _async_session_maker
    if _async_session_maker is None:
        _async_session_maker = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
    return _async_session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    The session is committed when the request handler returns and rolled
    back if it raises.

    Usage in FastAPI:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    Yields:
        AsyncSession: An async database session.
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """
    Initialize database tables.

    Note: In production, use Alembic migrations instead.
    This is useful for testing or initial development.
    """
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    global _engine, _async_session_maker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_maker = None
