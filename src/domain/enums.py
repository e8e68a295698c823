"""Domain enumerations for Bundle-Sentinel.

Values mirror the FHIR R5 code systems they stand for so they can be
rendered directly into an OperationOutcome.
"""

from enum import Enum


class IssueSeverity(str, Enum):
    """FHIR IssueSeverity (http://hl7.org/fhir/issue-severity)."""
    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


class IssueType(str, Enum):
    """Subset of FHIR IssueType (http://hl7.org/fhir/issue-type) used by the validators."""
    STRUCTURE = "structure"
    REQUIRED = "required"
    CODE_INVALID = "code-invalid"
    PROCESSING = "processing"
    INFORMATIONAL = "informational"


class TerminologyMode(str, Enum):
    """Lookup mode of the terminology adapter.

    VALIDATE_CODE uses the FHIR ``CodeSystem/$validate-code`` operation,
    NATIVE uses Snowstorm's browser concept endpoint and the ``active`` flag.
    """
    VALIDATE_CODE = "validate-code"
    NATIVE = "native"
