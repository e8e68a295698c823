"""Domain Services.

This package contains the validator modules and the services that run them.
None of them depend on infrastructure: the terminology service is reached
through the TerminologyPort.
"""

from src.domain.services.code_extractor import extract_codings
from src.domain.services.completeness_checker import CompletenessChecker
from src.domain.services.narrative import backfill_bundle_narratives, ensure_minimal_narrative
from src.domain.services.orchestrator import ValidationOrchestrator, run_modules
from src.domain.services.terminology_validator import TerminologyValidator

__all__ = [
    'extract_codings',
    'CompletenessChecker',
    'TerminologyValidator',
    'ValidationOrchestrator',
    'run_modules',
    'ensure_minimal_narrative',
    'backfill_bundle_narratives',
]
