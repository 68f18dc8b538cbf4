"""
Async SQLAlchemy engine & session factory.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs
and tests.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.pool import StaticPool

from cineghar.core.config import settings


def build_engine(url: str) -> AsyncEngine:
    """Pool settings depend on the backend; in-memory SQLite needs one shared connection."""
    options: dict[str, Any] = {"echo": False}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            options["poolclass"] = StaticPool
    else:
        options.update(pool_pre_ping=True, pool_size=20, max_overflow=10, pool_recycle=300)
    return create_async_engine(url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL)
async_session_factory = build_session_factory(engine)
