"""Health check models for the validation API."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


class TerminologyHealth(BaseModel):
    """Terminology server health status model.

    Attributes:
        status: Whether the server answered
        base_url: Configured server root URL
        mode: Configured lookup mode
        response_time_ms: Server response time in milliseconds (optional)
    """
    status: Literal["reachable", "unreachable"]
    base_url: str
    mode: str
    response_time_ms: float | None = Field(None, description="Terminology response time in milliseconds")


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Overall service status
        timestamp: Current timestamp
        version: Application version
        terminology: Terminology server health information
    """
    status: Literal["healthy", "degraded"]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Current UTC timestamp")
    version: str = Field(..., description="Application version")
    terminology: TerminologyHealth
