"""
ScamFusion API Routes

Combines all route modules into a single router.
"""

from fastapi import APIRouter

from .analyze import router as analyze_router
from .health import router as health_router


def get_api_router() -> APIRouter:
    """Get combined API router with all routes."""
    api_router = APIRouter(prefix="/api/v1")

    api_router.include_router(health_router)
    api_router.include_router(analyze_router)

    return api_router


__all__ = ['get_api_router']
