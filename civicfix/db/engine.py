"""Async SQLAlchemy engine and session factory construction.

Nothing here is created at import time; the process entry point builds the
engine, hands the session factory to the repository and disposes it on exit.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def normalize_database_url(url: str) -> str:
    """Map plain ``postgres://`` URLs onto the asyncpg driver."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    url = normalize_database_url(database_url)
    if url.startswith("sqlite+aiosqlite:///") and ":memory:" not in url:
        Path(url.replace("sqlite+aiosqlite:///", "")).parent.mkdir(parents=True, exist_ok=True)
        return create_async_engine(url, echo=echo)
    return create_async_engine(url, echo=echo, pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
