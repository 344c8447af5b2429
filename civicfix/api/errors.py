"""Translate the complaint error taxonomy into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from civicfix.errors import (
    AttachmentRejectedError,
    AttachmentWriteError,
    ComplaintError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _body(error: str, exc: Exception) -> dict:
    return {"error": error, "message": str(exc)}


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    if isinstance(exc, AttachmentRejectedError) and exc.too_large:
        return JSONResponse(_body("Image too large", exc), status_code=413)
    return JSONResponse(_body(str(exc), exc), status_code=400)


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(_body("Complaint not found", exc), status_code=404)


async def _attachment_write_error(request: Request, exc: AttachmentWriteError) -> JSONResponse:
    logger.error("Attachment upload failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(_body("Failed to store image", exc), status_code=500)


async def _repository_error(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.error("Repository failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(_body("Database error", exc), status_code=500)


async def _complaint_error(request: Request, exc: ComplaintError) -> JSONResponse:
    logger.exception("Unhandled complaint error on %s %s", request.method, request.url.path)
    return JSONResponse(_body("Internal server error", exc), status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(AttachmentWriteError, _attachment_write_error)
    app.add_exception_handler(RepositoryError, _repository_error)
    app.add_exception_handler(ComplaintError, _complaint_error)
