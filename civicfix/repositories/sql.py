"""Relational complaint repository (SQLite/PostgreSQL via async SQLAlchemy)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from sqlalchemy import select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from civicfix.errors import NotFoundError, RepositoryError
from civicfix.models import Base, Complaint, utcnow
from civicfix.repositories.base import ComplaintRepository
from civicfix.repositories.fields import check_insert_fields, check_update_fields
from civicfix.schemas.complaint import ComplaintRead, ComplaintStatus


class SqlComplaintRepository(ComplaintRepository):

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory
        self._clock = clock

    async def insert(self, fields: dict[str, Any]) -> ComplaintRead:
        values = check_insert_fields(fields)
        try:
            async with self._session_factory() as db:
                row = Complaint(
                    **values,
                    status=ComplaintStatus.PENDING.value,
                    submitted_at=self._clock(),
                )
                db.add(row)
                await db.commit()
                await db.refresh(row)
                return ComplaintRead.model_validate(row)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to insert complaint: {e}") from e

    async def list_all(self) -> list[ComplaintRead]:
        try:
            async with self._session_factory() as db:
                result = await db.execute(select(Complaint).order_by(Complaint.id.desc()))
                return [ComplaintRead.model_validate(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to list complaints: {e}") from e

    async def get(self, complaint_id: str) -> ComplaintRead:
        try:
            async with self._session_factory() as db:
                row = await db.get(Complaint, complaint_id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to load complaint {complaint_id}: {e}") from e
        if row is None:
            raise NotFoundError(complaint_id)
        return ComplaintRead.model_validate(row)

    async def update_fields(self, complaint_id: str, fields: dict[str, Any]) -> ComplaintRead:
        values = check_update_fields(fields)
        values = {k: (v.value if isinstance(v, ComplaintStatus) else v) for k, v in values.items()}
        stmt = (
            update(Complaint)
            .where(Complaint.id == complaint_id)
            .values(**values)
            .returning(Complaint)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                row = result.scalar_one_or_none()
                if row is None:
                    await db.rollback()
                    raise NotFoundError(complaint_id)
                snapshot = ComplaintRead.model_validate(row)
                await db.commit()
                return snapshot
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to update complaint {complaint_id}: {e}") from e

    async def delete(self, complaint_id: str) -> ComplaintRead:
        try:
            async with self._session_factory() as db:
                row = await db.get(Complaint, complaint_id)
                if row is None:
                    raise NotFoundError(complaint_id)
                snapshot = ComplaintRead.model_validate(row)
                await db.delete(row)
                await db.commit()
                return snapshot
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to delete complaint {complaint_id}: {e}") from e

    async def create_schema(self) -> None:
        try:
            async with self._session_factory() as db:
                conn = await db.connection()
                await conn.run_sync(Base.metadata.create_all)
                await db.commit()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to create schema: {e}") from e

    async def ping(self) -> None:
        try:
            async with self._session_factory() as db:
                await db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database unreachable: {e}") from e
