"""SQLAlchemy declarative base and ULID identifier helper."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase
from ulid import ULID


class Base(DeclarativeBase):
    pass


def new_id() -> str:
    """26-char ULID; lexicographic order follows creation time."""
    return str(ULID())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
