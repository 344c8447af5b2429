"""Closed field sets and the field-map to SQL builder.

Only names listed here ever reach a statement; anything else is rejected
before a query is built.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from civicfix.errors import EmptyUpdateError, UnknownFieldError

COLUMNS = (
    "id", "location", "description", "contact", "status", "assigned_to",
    "before_image_url", "after_image_url", "submitted_at", "completed_at",
)
INSERTABLE = frozenset({"location", "description", "contact", "before_image_url"})
UPDATABLE = frozenset({"status", "assigned_to", "after_image_url", "completed_at"})


def check_insert_fields(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - INSERTABLE
    if unknown:
        raise UnknownFieldError(list(unknown))
    return dict(fields)


def check_update_fields(fields: dict[str, Any]) -> dict[str, Any]:
    if not fields:
        raise EmptyUpdateError()
    unknown = set(fields) - UPDATABLE
    if unknown:
        raise UnknownFieldError(list(unknown))
    return dict(fields)


def to_param(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def build_set_clause(fields: dict[str, Any]) -> tuple[str, list[Any]]:
    """Render ``a = ?, b = ?`` plus positional params for an update field map."""
    checked = check_update_fields(fields)
    names = [name for name in COLUMNS if name in checked]
    clause = ", ".join(f"{name} = ?" for name in names)
    return clause, [to_param(checked[name]) for name in names]
