"""Domain Ports - Abstract Contracts for Validation.

This module defines the Port interfaces (abstract contracts) that adapters and
validator modules must implement. Following Hexagonal Architecture, the Domain
Core defines what it needs, not how it's provided.

Architecture:
    - Pure abstract interfaces with zero infrastructure dependencies
    - The terminology adapter (Snowstorm over HTTP) implements TerminologyPort
    - Validator modules implement ValidatorModule and are wired explicitly by
      the application's startup code, never discovered implicitly
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from src.domain.document import Node
from src.domain.models import Issue

# Type variable for Result generic
T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    Adapters use it internally so failures can be logged with their context
    before being collapsed into the plain answer the domain asks for.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error information (only present if success=False)
        error_type: Type of error (TimeoutException, HTTPStatusError, etc.)
        error_details: Additional error context (code, status_code, url, etc.)

    Example:
        ```python
        result = adapter.check_code("22298006")
        if result.is_success():
            return result.value
        logger.warning(f"Lookup failed: {result.error}")
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result.

        Parameters:
            value: The successful result value

        Returns:
            Result: Success result with the value
        """
        return cls(
            success=True,
            value=value,
            error=None,
            error_type=None,
            error_details=None
        )

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error (e.g., "TimeoutException", "MalformedResponse")
            error_details: Additional context (code, status_code, etc.)

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class BundleValidationError(Exception):
    """Base exception for defects in the validation service.

    Expected validation outcomes (missing resources, invalid codes, an
    unreachable terminology server) are reported as Issues, never raised.
    """
    pass


class InvalidDocumentError(BundleValidationError, ValueError):
    """Raised when the document handed to the core is missing or unusable.

    Attributes:
        details: Additional error details
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(BundleValidationError):
    """Raised when startup configuration is invalid.

    Attributes:
        setting: Name of the offending setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message)
        self.setting = setting


# ============================================================================
# Ports
# ============================================================================

class TerminologyPort(ABC):
    """Abstract contract for terminology lookups.

    Implementations answer "is this code valid" for the single coding system
    they are configured for. All methods are fail-closed: any failure to get a
    definitive positive answer (non-2xx status, malformed body, timeout,
    connection error) returns False. They never raise to the caller.

    Example Usage:
        ```python
        if not terminology.lookup("22298006"):
            issues.append(Issue.error("SNOMED CT code 22298006 is not valid"))
        ```
    """

    @abstractmethod
    def is_valid(self, code: str) -> bool:
        """Validate a code with the terminology service's validate-code operation.

        Parameters:
            code: Code to validate

        Returns:
            bool: True only if the service explicitly confirms the code
        """
        pass

    @abstractmethod
    def exists_and_active(self, code: str) -> bool:
        """Look up a concept directly and check that it is active.

        Parameters:
            code: Concept identifier

        Returns:
            bool: True only if the concept exists and is explicitly active
        """
        pass

    @abstractmethod
    def lookup(self, code: str) -> bool:
        """Check a code with whichever mode this deployment is configured for.

        Parameters:
            code: Code to check

        Returns:
            bool: Result of is_valid() or exists_and_active()
        """
        pass


class ValidatorModule(ABC):
    """Abstract contract for a validator module run by the orchestrator.

    Modules are independent: each inspects the whole document and returns its
    own issues without seeing what other modules reported.
    """

    #: Short identifier used in logs
    name: str = "validator"

    @abstractmethod
    def check(self, document: Node) -> list[Issue]:
        """Validate a document.

        Parameters:
            document: Root node of the document tree (never mutated)

        Returns:
            list[Issue]: Issues found, in emission order (empty if none)
        """
        pass
