"""Main FastAPI application for Bundle-Sentinel.

This module sets up the FastAPI application with all routes, middleware,
and configuration for the validation API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from src.api.dependencies import shutdown_dependencies
from src.api.middleware import setup_middleware
from src.api.routes import health, validation
from src.infrastructure.logging_config import setup_logging
from src.infrastructure.settings import APP_VERSION, settings

# Configure structured logging
setup_logging(use_json=settings.json_logs, log_level=settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    logger.info(f"{settings.app_name} API starting up...")
    logger.info("API documentation available at /api/docs")
    logger.info(f"Logging level: {settings.log_level}")
    logger.info(f"JSON logs: {settings.json_logs}")
    yield
    # Shutdown
    shutdown_dependencies()
    logger.info(f"{settings.app_name} API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="Bundle-Sentinel API",
    description="FHIR Bundle completeness and SNOMED CT terminology validation",
    version=APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Setup custom middleware
setup_middleware(app)

# Include routers
app.include_router(health.router)
app.include_router(validation.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Bundle-Sentinel API",
        "version": APP_VERSION,
        "docs": "/api/docs",
        "health": "/api/health",
        "validate": "/api/validate/bundle"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level="info"
    )
