"""Application wiring for Bundle-Sentinel.

This module builds the validation pipeline from configuration: the terminology
adapter, the ordered list of validator modules and the orchestrator that runs
them. Both the API and the CLI use it, so they validate identically.

Architecture:
    - Follows Hexagonal Architecture principles
    - Validator modules are registered explicitly, in the order they run
    - Configuration is loaded once and passed into each component
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from src.adapters.terminology import SnowstormTerminologyAdapter
from src.domain.document import from_json
from src.domain.models import OutcomeReport
from src.domain.ports import InvalidDocumentError, TerminologyPort, ValidatorModule
from src.domain.services import (
    CompletenessChecker,
    TerminologyValidator,
    ValidationOrchestrator,
    backfill_bundle_narratives,
)
from src.infrastructure.config_manager import AppConfig

logger = logging.getLogger(__name__)

# The json module recurses per nesting level; deeper documents are rejected
NESTING_TOO_DEEP = "Document nesting too deep to parse"


def create_terminology_adapter(config: AppConfig) -> SnowstormTerminologyAdapter:
    """Create the terminology adapter for the configured server.

    Parameters:
        config: Application configuration

    Returns:
        SnowstormTerminologyAdapter: Adapter owning its own HTTP client
    """
    logger.info(
        f"Initializing Snowstorm adapter: {config.terminology.base_url} "
        f"(mode={config.terminology.mode.value}, timeout={config.terminology.timeout_seconds}s)"
    )
    return SnowstormTerminologyAdapter(config.terminology, system=config.validation.target_system)


def build_validation_modules(config: AppConfig, terminology: TerminologyPort) -> list[ValidatorModule]:
    """Build the validator modules in the order they run.

    Parameters:
        config: Application configuration
        terminology: Terminology adapter used by the terminology module

    Returns:
        list[ValidatorModule]: Completeness check first, then terminology
    """
    return [
        CompletenessChecker(config.validation.required_types),
        TerminologyValidator(
            terminology,
            target_system=config.validation.target_system,
            max_workers=config.terminology.max_workers,
        ),
    ]


def build_orchestrator(config: AppConfig, terminology: TerminologyPort) -> ValidationOrchestrator:
    """Create the orchestrator with the standard module list."""
    return ValidationOrchestrator(build_validation_modules(config, terminology))


def validate_payload(payload: Any, orchestrator: ValidationOrchestrator) -> OutcomeReport:
    """Validate a parsed JSON document.

    Generated narratives are backfilled into Bundle entries first, then the
    payload is converted into the immutable document tree and validated.

    Parameters:
        payload: Output of ``json.loads``
        orchestrator: Orchestrator to run

    Returns:
        OutcomeReport: Validation outcome
    """
    backfill_bundle_narratives(payload)
    return orchestrator.validate(from_json(payload))


def load_document(path: Path) -> Any:
    """Read and parse a JSON document from disk.

    Raises:
        InvalidDocumentError: If the file is not valid UTF-8 JSON or is nested
            deeper than the JSON parser allows
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidDocumentError(f"Malformed JSON document: {e}", details={"path": str(path)}) from e
    except RecursionError as e:
        raise InvalidDocumentError(NESTING_TOO_DEEP, details={"path": str(path)}) from e


def validate_file(path: Path, config: AppConfig, terminology: Optional[TerminologyPort] = None) -> OutcomeReport:
    """Validate a JSON document stored in a file.

    Parameters:
        path: JSON file path
        config: Application configuration
        terminology: Optional terminology adapter; one is created (and
            closed afterwards) from config when omitted

    Returns:
        OutcomeReport: Validation outcome
    """
    payload = load_document(path)
    if terminology is not None:
        return validate_payload(payload, build_orchestrator(config, terminology))

    with create_terminology_adapter(config) as adapter:
        return validate_payload(payload, build_orchestrator(config, adapter))
