"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import Response

from civicfix.api.errors import register_error_handlers
from civicfix.api.router import api_router
from civicfix.bootstrap import open_backends
from civicfix.config import configure_logging, get_settings
from civicfix.dependencies import get_lifecycle_service
from civicfix.services.lifecycle import ComplaintLifecycleService
from civicfix.storage import LocalAttachmentStore

_CONTENT_TYPES = {
    ".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".png": "image/png",
    ".webp": "image/webp", ".gif": "image/gif",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    async with open_backends(settings, create_schema=settings.auto_create_schema) as lifecycle:
        app.state.lifecycle = lifecycle
        yield


app = FastAPI(
    title="CivicFix",
    description="Citizen infrastructure complaints with before/after photo evidence.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(api_router)
register_error_handlers(app)


# Public URLs of the local attachment store resolve here; S3/R2 objects are served by the bucket
@app.get("/images/{key}")
async def serve_image(key: str, lifecycle: ComplaintLifecycleService = Depends(get_lifecycle_service)):
    store = lifecycle.attachments
    if not isinstance(store, LocalAttachmentStore):
        raise HTTPException(404, "Image not found")
    try:
        data = await store.read(key)
    except (FileNotFoundError, ValueError):
        raise HTTPException(404, "Image not found")
    content_type = _CONTENT_TYPES.get(Path(key).suffix.lower(), "application/octet-stream")
    return Response(content=data, media_type=content_type)
