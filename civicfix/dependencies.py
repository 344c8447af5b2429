"""FastAPI dependency providers."""

from __future__ import annotations

from fastapi import Request

from civicfix.services.lifecycle import ComplaintLifecycleService


def get_lifecycle_service(request: Request) -> ComplaintLifecycleService:
    """The service built by the app lifespan; tests override this dependency."""
    return request.app.state.lifecycle
