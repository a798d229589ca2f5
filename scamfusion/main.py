"""
ScamFusion API Application

Main FastAPI application entry point.
"""

# Load environment variables before settings are read
import os
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scamfusion.api.routes import get_api_router
from scamfusion.config import get_settings
from scamfusion.services.fusion import create_fusion_controller
from scamfusion.utils.constants import APP_DESCRIPTION, APP_NAME
from scamfusion.utils.exceptions import InvalidInputError

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting {APP_NAME} API...")

    logger.info("=== Detection Configuration ===")
    logger.info(f"  Registry lookups: {'✓' if settings.registry_enabled else '✗'}")
    logger.info(f"  Secondary model: {'✓' if settings.model_enabled and settings.model_path else '✗'}")
    logger.info(f"  Model daily quota: {settings.model_daily_quota}")
    logger.info(f"  Scam threshold: {settings.scam_threshold}")

    app.state.controller = create_fusion_controller(settings)
    logger.info(f"{APP_NAME} API started successfully")

    yield

    logger.info(f"Shutting down {APP_NAME} API...")
    await app.state.controller.close()
    app.state.controller = None
    logger.info(f"{APP_NAME} API shutdown complete")


app = FastAPI(
    title=f"{APP_NAME} API",
    description=APP_DESCRIPTION,
    version=get_settings().app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


def get_cors_origins():
    """Get CORS origins from environment or use defaults."""
    custom_origins = os.getenv("CORS_ORIGINS", "")

    if custom_origins:
        origins = [origin.strip() for origin in custom_origins.split(",") if origin.strip()]
    else:
        # Default: localhost only (development)
        origins = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]

    logger.info(f"CORS allowed origins: {origins}")
    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(get_api_router())


@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": f"{APP_NAME} API",
        "description": APP_DESCRIPTION,
        "version": get_settings().app_version,
        "docs": "/docs",
    }


# Root-level health check (for Docker/K8s)
@app.get("/health")
async def health():
    """Basic health check."""
    return {
        "status": "healthy",
        "service": "scamfusion-api",
        "version": get_settings().app_version,
    }


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"error": "Invalid input", "detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if get_settings().debug else "An error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("scamfusion.main:app", host="0.0.0.0", port=8000, reload=get_settings().debug)
