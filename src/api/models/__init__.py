"""API Pydantic models."""

from src.api.models.health import HealthResponse, TerminologyHealth
from src.api.models.outcome import OperationOutcome, OperationOutcomeIssue

__all__ = [
    "HealthResponse",
    "TerminologyHealth",
    "OperationOutcome",
    "OperationOutcomeIssue",
]
