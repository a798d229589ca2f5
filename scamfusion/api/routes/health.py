"""
ScamFusion Health Check Route
"""

from fastapi import APIRouter, Depends

from scamfusion.api.dependencies import get_app_settings, get_controller
from scamfusion.config import Settings
from scamfusion.services.fusion import FusionController

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


@router.get("/ready")
async def readiness_check(controller: FusionController = Depends(get_controller)):
    """
    Readiness check with optional stage status.

    Local scoring is always ready; registries and the model are reported so
    an operator can see which escalations are currently possible.
    """
    model = controller.model
    checks = {
        "lexical": "ok",
        "url": "ok",
        "registry": "enabled" if controller.registry_available else "disabled",
        "model": "available" if controller.model_available else "unavailable",
    }

    return {
        "status": "ready",
        "checks": checks,
        "registries": controller.registry.status() if controller.registry is not None else {},
        "model": {
            "quota_remaining": model.quota.remaining if model is not None else 0,
            "last_error": model.last_error if model is not None else None,
        },
    }
