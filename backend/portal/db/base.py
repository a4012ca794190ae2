"""SQLAlchemy declarative base and the process-wide async engine.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs and
tests. Tables are created from the ORM metadata at startup.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from portal.core.config import get_settings


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Async engine for url. In-memory SQLite is pinned to a single connection."""
    if not url.startswith("sqlite"):
        return create_async_engine(url, echo=echo, pool_pre_ping=True)

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
        kwargs["poolclass"] = StaticPool
    return create_async_engine(url, echo=echo, **kwargs)


async def init_db(url: str | None = None) -> None:
    """Create the engine and session factory, then any missing tables.

    A second call is a no-op while the first engine is alive.
    """
    global _engine, _session_factory

    if _engine is not None:
        return

    settings = get_settings()
    _engine = create_engine(url or settings.database_url, echo=settings.debug)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)

    import portal.db.models  # noqa: F401  (registers every table on Base.metadata)

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Raises RuntimeError if init_db() has not been called."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory


async def ping_db() -> bool:
    """True when the engine is initialized and answers SELECT 1."""
    if _session_factory is None:
        return False
    async with _session_factory() as session:
        await session.execute(text("SELECT 1"))
    return True
