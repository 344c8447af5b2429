"""Shared fixtures: sample images, an in-memory SQL repository and recording fakes."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from civicfix.errors import AttachmentDeleteError, AttachmentWriteError, NotFoundError
from civicfix.models import Base
from civicfix.repositories.base import ComplaintRepository
from civicfix.repositories.fields import check_insert_fields, check_update_fields
from civicfix.repositories.sql import SqlComplaintRepository
from civicfix.schemas import AttachmentUpload, ComplaintRead
from civicfix.storage.base import AttachmentRef, AttachmentStore, generate_key, key_from_ref

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def jpeg_bytes():
    img = Image.new("RGB", (64, 48), color=(70, 130, 180))
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def photo(jpeg_bytes):
    return AttachmentUpload(data=jpeg_bytes, filename="photo.jpg", content_type="image/jpeg")


@pytest_asyncio.fixture
async def sql_repo():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield SqlComplaintRepository(factory)
    await engine.dispose()


class MemoryRepository(ComplaintRepository):
    """Dict-backed repository that records every call it receives."""

    def __init__(self):
        self.rows: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, Any]] = []
        self._seq = 0

    async def insert(self, fields):
        self.calls.append(("insert", dict(fields)))
        values = check_insert_fields(fields)
        self._seq += 1
        row = {
            "id": f"{self._seq:026d}",
            "contact": None, "assigned_to": None, "after_image_url": None, "completed_at": None,
            **values,
            "status": "pending",
            "submitted_at": FIXED_NOW,
        }
        self.rows[row["id"]] = row
        return ComplaintRead.model_validate(row)

    async def list_all(self):
        self.calls.append(("list_all", None))
        return [ComplaintRead.model_validate(r) for _, r in sorted(self.rows.items(), reverse=True)]

    async def get(self, complaint_id):
        self.calls.append(("get", complaint_id))
        if complaint_id not in self.rows:
            raise NotFoundError(complaint_id)
        return ComplaintRead.model_validate(self.rows[complaint_id])

    async def update_fields(self, complaint_id, fields):
        self.calls.append(("update_fields", dict(fields)))
        values = check_update_fields(fields)
        if complaint_id not in self.rows:
            raise NotFoundError(complaint_id)
        self.rows[complaint_id].update(values)
        return ComplaintRead.model_validate(self.rows[complaint_id])

    async def delete(self, complaint_id):
        self.calls.append(("delete", complaint_id))
        if complaint_id not in self.rows:
            raise NotFoundError(complaint_id)
        return ComplaintRead.model_validate(self.rows.pop(complaint_id))

    async def create_schema(self):
        pass

    async def ping(self):
        pass

    def called(self, name: str) -> bool:
        return any(call == name for call, _ in self.calls)


class RecordingStore(AttachmentStore):
    """Attachment store that keeps objects in memory and can be told to fail."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.puts: list[str] = []
        self.deletes: list[str] = []
        self.fail_put = False
        self.fail_delete_keys: set[str] = set()

    def url_for(self, key):
        return f"https://cdn.example.test/{key}"

    async def put(self, payload, original_name, content_type, role):
        key = generate_key(role, original_name)
        self.puts.append(key)
        if self.fail_put:
            raise AttachmentWriteError(key, "bucket quota exceeded")
        self.objects[key] = payload
        return AttachmentRef(key=key, url=self.url_for(key))

    async def delete(self, ref):
        key = key_from_ref(ref)
        self.deletes.append(key)
        if key in self.fail_delete_keys:
            raise AttachmentDeleteError(key, "network unreachable")
        self.objects.pop(key, None)


@pytest.fixture
def memory_repo():
    return MemoryRepository()


@pytest.fixture
def store():
    return RecordingStore()
