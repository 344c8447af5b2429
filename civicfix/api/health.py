from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from civicfix.dependencies import get_lifecycle_service
from civicfix.errors import RepositoryError
from civicfix.services.lifecycle import ComplaintLifecycleService

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(service: ComplaintLifecycleService = Depends(get_lifecycle_service)):
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        await service.repository.ping()
    except RepositoryError as e:
        return JSONResponse(
            {"status": "error", "database": "disconnected", "error": str(e), "timestamp": timestamp},
            status_code=503,
        )
    return {"status": "ok", "database": "connected", "timestamp": timestamp}
