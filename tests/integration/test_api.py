"""Integration tests for the complaint API over SQLite + local disk storage."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from civicfix.config import UploadConfig
from civicfix.dependencies import get_lifecycle_service
from civicfix.errors import RepositoryError
from civicfix.main import app
from civicfix.services.lifecycle import ComplaintLifecycleService
from civicfix.storage import LocalAttachmentStore


@asynccontextmanager
async def _client_for(service):
    app.dependency_overrides[get_lifecycle_service] = lambda: service
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def service(sql_repo, tmp_path):
    return ComplaintLifecycleService(sql_repo, LocalAttachmentStore(tmp_path / "images"))


@pytest_asyncio.fixture
async def client(service):
    async with _client_for(service) as ac:
        yield ac


async def _create(client, jpeg_bytes, **form):
    data = {"location": "Main St", "description": "Pothole", "contact": "555-0100", **form}
    return await client.post(
        "/api/complaints",
        data=data,
        files={"image": ("photo.jpg", jpeg_bytes, "image/jpeg")},
    )


async def test_create_and_list(client, jpeg_bytes):
    r = await _create(client, jpeg_bytes)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    complaint = body["complaint"]
    assert complaint["status"] == "pending"
    assert complaint["before_image_url"].startswith("/images/before-")
    assert complaint["before_image_url"].endswith(".jpg")
    assert complaint["after_image_url"] is None
    assert complaint["completed_at"] is None
    assert complaint["submitted_at"]

    r = await client.get("/api/complaints")
    assert r.status_code == 200
    assert [c["id"] for c in r.json()["complaints"]] == [complaint["id"]]


async def test_uploaded_image_is_served(client, jpeg_bytes):
    complaint = (await _create(client, jpeg_bytes)).json()["complaint"]
    r = await client.get(complaint["before_image_url"])
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/jpeg"
    assert r.content == jpeg_bytes
    assert (await client.get("/images/before-0-missing.jpg")).status_code == 404


async def test_create_missing_fields_returns_400(client, jpeg_bytes):
    r = await client.post("/api/complaints", data={"location": "Main St", "description": "Pothole"})
    assert r.status_code == 400
    assert "image" in r.json()["error"]

    r = await _create(client, jpeg_bytes, location="")
    assert r.status_code == 400
    assert (await client.get("/api/complaints")).json()["complaints"] == []


async def test_create_rejects_non_image(client):
    r = await client.post(
        "/api/complaints",
        data={"location": "Main St", "description": "Pothole"},
        files={"image": ("notes.txt", b"just text", "text/plain")},
    )
    assert r.status_code == 400


async def test_update_to_completed_with_after_image(client, jpeg_bytes):
    complaint = (await _create(client, jpeg_bytes)).json()["complaint"]

    r = await client.put(
        f"/api/complaints/{complaint['id']}",
        data={"status": "completed", "assigned_to": "Crew 7"},
        files={"after_image": ("fixed.png", jpeg_bytes, "image/jpeg")},
    )
    assert r.status_code == 200
    updated = r.json()["complaint"]
    assert updated["status"] == "completed"
    assert updated["completed_at"] is not None
    assert updated["assigned_to"] == "Crew 7"
    assert updated["after_image_url"].startswith("/images/after-")
    assert updated["after_image_url"].endswith(".png")
    assert updated["before_image_url"] == complaint["before_image_url"]


async def test_update_errors(client, jpeg_bytes):
    complaint = (await _create(client, jpeg_bytes)).json()["complaint"]

    r = await client.put(f"/api/complaints/{complaint['id']}", data={})
    assert r.status_code == 400
    assert r.json()["error"] == "No fields to update"

    r = await client.put(f"/api/complaints/{complaint['id']}", data={"status": "archived"})
    assert r.status_code == 400

    r = await client.put("/api/complaints/01NOPE0000000000000000000", data={"status": "assigned"})
    assert r.status_code == 404


async def test_get_single_complaint(client, jpeg_bytes):
    complaint = (await _create(client, jpeg_bytes)).json()["complaint"]
    r = await client.get(f"/api/complaints/{complaint['id']}")
    assert r.status_code == 200
    assert r.json()["complaint"]["location"] == "Main St"
    assert (await client.get("/api/complaints/01NOPE0000000000000000000")).status_code == 404


async def test_delete_removes_record_and_files(client, service, jpeg_bytes):
    complaint = (await _create(client, jpeg_bytes)).json()["complaint"]
    await client.put(
        f"/api/complaints/{complaint['id']}",
        files={"after_image": ("after.jpg", jpeg_bytes, "image/jpeg")},
    )
    store = service.attachments
    assert len(list(store.base_dir.iterdir())) == 2

    r = await client.delete(f"/api/complaints/{complaint['id']}")
    assert r.status_code == 200
    body = r.json()
    assert body["deletedId"] == complaint["id"]
    assert body["attachmentFailures"] == []
    assert list(store.base_dir.iterdir()) == []

    assert (await client.delete(f"/api/complaints/{complaint['id']}")).status_code == 404


async def test_health(client, service, monkeypatch):
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["database"] == "connected"

    async def broken_ping():
        raise RepositoryError("connection refused")

    monkeypatch.setattr(service.repository, "ping", broken_ping)
    r = await client.get("/api/health")
    assert r.status_code == 503
    assert r.json()["status"] == "error"


async def test_oversized_image_returns_413(sql_repo, tmp_path, jpeg_bytes):
    service = ComplaintLifecycleService(
        sql_repo, LocalAttachmentStore(tmp_path / "images"), uploads=UploadConfig(max_bytes=64),
    )
    async with _client_for(service) as client:
        r = await _create(client, jpeg_bytes)
        assert r.status_code == 413
        body = r.json()
        assert body["error"] == "Image too large"
        assert body["message"]
        assert (await client.get("/api/complaints")).json()["complaints"] == []
    assert list((tmp_path / "images").iterdir()) == []


async def test_store_failure_returns_500(sql_repo, store, jpeg_bytes):
    store.fail_put = True
    async with _client_for(ComplaintLifecycleService(sql_repo, store)) as client:
        r = await _create(client, jpeg_bytes)
        assert r.status_code == 500
        assert r.json()["error"] == "Failed to store image"
        assert "bucket quota exceeded" in r.json()["message"]
        assert (await client.get("/api/complaints")).json()["complaints"] == []


async def test_repository_failure_returns_500(client, service, monkeypatch):
    async def broken_list_all():
        raise RepositoryError("disk I/O error")

    monkeypatch.setattr(service.repository, "list_all", broken_list_all)
    r = await client.get("/api/complaints")
    assert r.status_code == 500
    assert r.json() == {"error": "Database error", "message": "disk I/O error"}
