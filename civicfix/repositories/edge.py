"""Edge complaint repository over a serverless SQL HTTP API.

The wire shape follows the D1 query endpoint:

    POST {api_base}/accounts/{account}/d1/database/{database}/query
    {"sql": "...", "params": [...]}
    -> {"success": true, "errors": [], "result": [{"results": [...rows]}]}
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

import httpx

from civicfix.errors import NotFoundError, RepositoryError
from civicfix.models.base import new_id, utcnow
from civicfix.repositories.base import ComplaintRepository
from civicfix.repositories.fields import COLUMNS, build_set_clause, check_insert_fields, to_param
from civicfix.schemas.complaint import ComplaintRead, ComplaintStatus

logger = logging.getLogger(__name__)

SCHEMA_SQL = """CREATE TABLE IF NOT EXISTS complaints (
    id TEXT PRIMARY KEY,
    location TEXT NOT NULL,
    description TEXT NOT NULL,
    contact TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    assigned_to TEXT,
    before_image_url TEXT NOT NULL,
    after_image_url TEXT,
    submitted_at TEXT NOT NULL,
    completed_at TEXT
)"""

_SELECT_COLUMNS = ", ".join(COLUMNS)


class EdgeSqlClient:
    """Thin async wrapper around the edge SQL query endpoint."""

    def __init__(self, http: httpx.AsyncClient, account_id: str, database_id: str):
        self.http = http
        self.path = f"/accounts/{account_id}/d1/database/{database_id}/query"

    async def query(self, sql: str, params: list[Any] | None = None) -> list[dict[str, Any]]:
        try:
            resp = await self.http.post(self.path, json={"sql": sql, "params": params or []})
        except httpx.HTTPError as e:
            raise RepositoryError(f"Edge SQL request failed: {e}") from e
        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.is_error or not isinstance(body, dict) or not body.get("success", False):
            errors = (body.get("errors") or []) if isinstance(body, dict) else []
            messages = "; ".join(
                err.get("message", str(err)) if isinstance(err, dict) else str(err) for err in errors
            )
            raise RepositoryError(
                f"Edge SQL query failed ({resp.status_code}): {messages or resp.text[:200] or 'no details'}"
            )

        results = body.get("result") or []
        if not results:
            return []
        return list(results[0].get("results") or [])


class EdgeComplaintRepository(ComplaintRepository):

    def __init__(
        self,
        client: EdgeSqlClient,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_id,
    ):
        self.client = client
        self._clock = clock
        self._id_factory = id_factory

    async def insert(self, fields: dict[str, Any]) -> ComplaintRead:
        values = check_insert_fields(fields)
        row = {
            "id": self._id_factory(),
            "location": values.get("location"),
            "description": values.get("description"),
            "contact": values.get("contact"),
            "status": ComplaintStatus.PENDING.value,
            "before_image_url": values.get("before_image_url"),
            "submitted_at": self._clock(),
        }
        names = list(row)
        sql = (
            f"INSERT INTO complaints ({', '.join(names)}) "
            f"VALUES ({', '.join('?' for _ in names)}) RETURNING {_SELECT_COLUMNS}"
        )
        rows = await self.client.query(sql, [to_param(row[n]) for n in names])
        if not rows:
            raise RepositoryError("Insert returned no row")
        return ComplaintRead.model_validate(rows[0])

    async def list_all(self) -> list[ComplaintRead]:
        rows = await self.client.query(f"SELECT {_SELECT_COLUMNS} FROM complaints ORDER BY id DESC")
        return [ComplaintRead.model_validate(r) for r in rows]

    async def get(self, complaint_id: str) -> ComplaintRead:
        rows = await self.client.query(
            f"SELECT {_SELECT_COLUMNS} FROM complaints WHERE id = ?", [complaint_id],
        )
        if not rows:
            raise NotFoundError(complaint_id)
        return ComplaintRead.model_validate(rows[0])

    async def update_fields(self, complaint_id: str, fields: dict[str, Any]) -> ComplaintRead:
        clause, params = build_set_clause(fields)
        rows = await self.client.query(
            f"UPDATE complaints SET {clause} WHERE id = ? RETURNING {_SELECT_COLUMNS}",
            [*params, complaint_id],
        )
        if not rows:
            raise NotFoundError(complaint_id)
        return ComplaintRead.model_validate(rows[0])

    async def delete(self, complaint_id: str) -> ComplaintRead:
        rows = await self.client.query(
            f"DELETE FROM complaints WHERE id = ? RETURNING {_SELECT_COLUMNS}", [complaint_id],
        )
        if not rows:
            raise NotFoundError(complaint_id)
        return ComplaintRead.model_validate(rows[0])

    async def create_schema(self) -> None:
        await self.client.query(SCHEMA_SQL)
        logger.info("Edge schema ensured")

    async def ping(self) -> None:
        await self.client.query("SELECT 1")
