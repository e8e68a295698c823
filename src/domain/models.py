"""Validation Domain Models.

This module defines the value objects produced while validating a clinical
document: coded values found in the document, the issues raised by validator
modules, and the outcome report aggregated from one validation run.

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Models are immutable (frozen) and validated at construction via Pydantic V2
    - Created fresh per validation request and discarded afterwards
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.enums import IssueSeverity, IssueType


class CodedValue(BaseModel):
    """A coded clinical term (FHIR Coding) found in a document.

    Parameters:
        system: Coding-system URI (e.g. http://snomed.info/sct)
        code: Code within the system; None when absent or not a string
        display: Optional human-readable display text
    """

    model_config = ConfigDict(frozen=True)

    system: str = Field(..., description="Coding-system URI")
    code: Optional[str] = Field(None, description="Code value")
    display: Optional[str] = Field(None, description="Display text")

    @property
    def is_blank(self) -> bool:
        """True when the code is missing or whitespace only."""
        return self.code is None or not self.code.strip()

    @property
    def location(self) -> str:
        """Location pointer in ``Coding(system|code)`` form."""
        return f"Coding({self.system}|{self.code})"


class Issue(BaseModel):
    """A single validation finding.

    Parameters:
        severity: Issue severity; the built-in modules only emit ERROR
        message: Human-readable description of the problem
        location: Optional pointer to the offending element
        code: FHIR issue type used when rendering an OperationOutcome
    """

    model_config = ConfigDict(frozen=True)

    severity: IssueSeverity = Field(..., description="Issue severity")
    message: str = Field(..., min_length=1, description="Issue description")
    location: Optional[str] = Field(None, description="Pointer to the offending element")
    code: IssueType = Field(default=IssueType.PROCESSING, description="FHIR issue type")

    @classmethod
    def error(
        cls,
        message: str,
        code: IssueType = IssueType.PROCESSING,
        location: Optional[str] = None
    ) -> "Issue":
        """Create an ERROR issue."""
        return cls(severity=IssueSeverity.ERROR, message=message, code=code, location=location)


class OutcomeReport(BaseModel):
    """Aggregated result of one validation run over one document.

    Issues are kept in the order the validator modules were registered and,
    within a module, in the order they were emitted. An empty issue list
    means the document passed validation.
    """

    model_config = ConfigDict(frozen=True)

    issues: tuple[Issue, ...] = Field(default_factory=tuple)

    @property
    def is_successful(self) -> bool:
        return not self.issues

    @property
    def error_count(self) -> int:
        return sum(
            1 for issue in self.issues
            if issue.severity in (IssueSeverity.ERROR, IssueSeverity.FATAL)
        )
