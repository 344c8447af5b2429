"""Backend wiring for both deployment topologies.

``open_backends`` owns every external client: it constructs them from
Settings, yields a ready ComplaintLifecycleService and tears the clients
down on exit.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator

import httpx

from civicfix.config import Settings
from civicfix.db.engine import create_engine, create_session_factory
from civicfix.repositories import ComplaintRepository, EdgeComplaintRepository, EdgeSqlClient, SqlComplaintRepository
from civicfix.services.lifecycle import ComplaintLifecycleService
from civicfix.storage import AttachmentStore, LocalAttachmentStore, S3AttachmentStore, create_s3_client

logger = logging.getLogger(__name__)


def _open_repository(settings: Settings, stack: AsyncExitStack) -> ComplaintRepository:
    if settings.backend == "edge":
        cfg = settings.edge_sql
        if not (cfg.account_id and cfg.database_id):
            raise RuntimeError("Edge backend needs edge_sql.account_id and edge_sql.database_id")
        http = httpx.AsyncClient(
            base_url=cfg.api_base,
            headers={"Authorization": f"Bearer {cfg.api_token}"},
            timeout=cfg.timeout_seconds,
        )
        stack.push_async_callback(http.aclose)
        return EdgeComplaintRepository(EdgeSqlClient(http, cfg.account_id, cfg.database_id))

    engine = create_engine(settings.database_url)
    stack.push_async_callback(engine.dispose)
    return SqlComplaintRepository(create_session_factory(engine))


def _open_attachment_store(settings: Settings, stack: AsyncExitStack) -> AttachmentStore:
    cfg = settings.storage
    if cfg.kind == "s3":
        if not cfg.bucket:
            raise RuntimeError("S3 storage needs storage.bucket")
        client = create_s3_client(
            endpoint_url=cfg.endpoint_url,
            region=cfg.region,
            access_key_id=cfg.access_key_id,
            secret_access_key=cfg.secret_access_key,
        )
        stack.callback(client.close)
        return S3AttachmentStore(client, cfg.bucket, cfg.public_base_url)
    return LocalAttachmentStore(cfg.base_dir, cfg.public_prefix)


@asynccontextmanager
async def open_backends(settings: Settings, create_schema: bool = False) -> AsyncIterator[ComplaintLifecycleService]:
    async with AsyncExitStack() as stack:
        repository = _open_repository(settings, stack)
        attachments = _open_attachment_store(settings, stack)
        if create_schema:
            await repository.create_schema()
        logger.info(
            "Backends ready: %s repository, %s attachments",
            type(repository).__name__, type(attachments).__name__,
        )
        yield ComplaintLifecycleService(
            repository,
            attachments,
            uploads=settings.uploads,
            lifecycle=settings.lifecycle,
        )
