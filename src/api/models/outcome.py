"""OperationOutcome models for the validation API.

Validation results are returned as FHIR OperationOutcome resources, the same
serialization family as the submitted Bundle.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from src.domain.enums import IssueSeverity, IssueType
from src.domain.models import OutcomeReport

NO_ISSUES_MESSAGE = "No issues detected during validation"


class OperationOutcomeIssue(BaseModel):
    """A single OperationOutcome issue.

    Attributes:
        severity: fatal | error | warning | information
        code: FHIR issue type
        diagnostics: Human-readable message
        location: Pointers to the offending elements (optional)
    """
    severity: IssueSeverity
    code: IssueType
    diagnostics: str
    location: Optional[list[str]] = Field(None, description="Element pointers")


class OperationOutcome(BaseModel):
    """FHIR OperationOutcome resource."""
    resourceType: Literal["OperationOutcome"] = "OperationOutcome"
    issue: list[OperationOutcomeIssue] = Field(..., min_length=1)

    @classmethod
    def from_report(cls, report: OutcomeReport) -> "OperationOutcome":
        """Render an OutcomeReport.

        An OperationOutcome must carry at least one issue, so a clean report
        becomes a single informational issue.
        """
        if report.is_successful:
            return cls(issue=[OperationOutcomeIssue(
                severity=IssueSeverity.INFORMATION,
                code=IssueType.INFORMATIONAL,
                diagnostics=NO_ISSUES_MESSAGE,
            )])
        return cls(issue=[
            OperationOutcomeIssue(
                severity=issue.severity,
                code=issue.code,
                diagnostics=issue.message,
                location=[issue.location] if issue.location else None,
            )
            for issue in report.issues
        ])

    def to_fhir(self) -> dict:
        """Serialize as FHIR JSON (absent elements omitted)."""
        return self.model_dump(mode="json", exclude_none=True)
