"""Async Session Factory — provides async DB sessions for direct usage outside FastAPI.

Invariants:
    - Engines built here get the same SQLite foreign-key pragma as DatabaseSessionManager
    - Meant for scripts, the schema init command, and test fixtures
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from fedlink.infrastructure.database import enable_sqlite_foreign_keys


def create_engine_for(database_url: str) -> AsyncEngine:
    """Create an async engine; in-memory SQLite shares one connection."""
    kwargs: dict = {"echo": False}
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        kwargs["poolclass"] = StaticPool
    engine = create_async_engine(database_url, **kwargs)
    enable_sqlite_foreign_keys(engine)
    return engine


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
