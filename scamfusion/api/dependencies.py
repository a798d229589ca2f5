"""
ScamFusion API Dependencies

FastAPI dependency injection for settings and the long-lived controller.
"""

import logging

from fastapi import HTTPException, Request

from scamfusion.config import Settings, get_settings
from scamfusion.services.fusion import FusionController

logger = logging.getLogger(__name__)


def get_app_settings() -> Settings:
    """Settings dependency (cached process-wide)."""
    return get_settings()


def get_controller(request: Request) -> FusionController:
    """
    Controller built during application startup.

    Raises:
        HTTPException: 503 while the application has not finished starting
    """
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        logger.error("Fusion controller requested before startup completed")
        raise HTTPException(status_code=503, detail="Detection engine not initialized")
    return controller
