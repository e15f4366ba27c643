"""
Async engine and session factory.

PostgreSQL (asyncpg) gets a sized connection pool; SQLite (aiosqlite) is
used for local runs and the test suite and keeps SQLAlchemy's defaults.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)

from workday.core.config import settings

POSTGRES_POOL = {
    "pool_size": 20,
    "max_overflow": 10,
    "pool_recycle": 300,
}


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    options: dict[str, Any] = {"echo": False, "pool_pre_ping": True}
    if url.startswith("postgresql"):
        options.update(POSTGRES_POOL)
    options.update(overrides)
    return create_async_engine(url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rule-sets hand committed records back to the API layer
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL)
async_session_factory = build_session_factory(engine)
