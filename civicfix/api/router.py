"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from civicfix.api.complaints import router as complaints_router
from civicfix.api.health import router as health_router

api_router = APIRouter()
api_router.include_router(complaints_router)
api_router.include_router(health_router)
