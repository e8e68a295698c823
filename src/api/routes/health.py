"""Health check endpoint for the validation API."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import ConfigDep, TerminologyDep
from src.api.models.health import HealthResponse, TerminologyHealth
from src.infrastructure.config_manager import AppConfig
from src.infrastructure.settings import APP_VERSION

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


async def check_terminology_health(terminology, config: AppConfig) -> TerminologyHealth:
    """Check terminology server reachability.

    Parameters:
        terminology: Terminology adapter instance
        config: Application configuration

    Returns:
        TerminologyHealth: Terminology server health status
    """
    result = await run_in_threadpool(terminology.ping)
    if result.is_success():
        status, response_time = "reachable", result.value
    else:
        logger.warning(f"Terminology health check failed: {result.error}")
        status, response_time = "unreachable", None

    return TerminologyHealth(
        status=status,
        base_url=config.terminology.base_url,
        mode=config.terminology.mode.value,
        response_time_ms=response_time,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(terminology: TerminologyDep, config: ConfigDep) -> HealthResponse:
    """Health check endpoint.

    The service stays up when the terminology server is unreachable, but every
    coded value then fails validation, so the status is reported as degraded.
    """
    try:
        terminology_health = await check_terminology_health(terminology, config)
        overall_status = "healthy" if terminology_health.status == "reachable" else "degraded"

        return HealthResponse(
            status=overall_status,
            timestamp=datetime.now(timezone.utc),
            version=APP_VERSION,
            terminology=terminology_health,
        )

    except Exception as e:
        logger.error(f"Health check failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Health check failed"
        )
