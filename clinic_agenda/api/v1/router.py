"""API v1 router configuration."""

from fastapi import APIRouter

from clinic_agenda.api.v1.endpoints import health, scheduling

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(scheduling.router, prefix="/scheduling", tags=["Scheduling"])
