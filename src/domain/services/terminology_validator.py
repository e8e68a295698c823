"""Terminology Validation Service.

Validator module that checks every coded value of the target coding system
against the terminology service and reports the ones it does not confirm.

Security Impact:
    - Fail-closed: a code the terminology service cannot confirm (including
      when the service is unreachable) is reported as invalid, so untrusted
      codes never pass by default

Architecture:
    - Pure domain service: the terminology service is reached through
      TerminologyPort
    - One lookup per extracted code occurrence; duplicates are looked up and
      reported once per occurrence
    - Lookups run sequentially unless max_workers > 1, in which case they are
      dispatched on a thread pool and merged back in extraction order
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from src.domain.constants import SNOMED_SYSTEM
from src.domain.document import Node
from src.domain.enums import IssueType
from src.domain.models import CodedValue, Issue
from src.domain.ports import TerminologyPort, ValidatorModule
from src.domain.services.code_extractor import extract_codings

logger = logging.getLogger(__name__)

# Display names for the systems we know, used in issue messages
SYSTEM_LABELS = {
    SNOMED_SYSTEM: "SNOMED CT",
}


class TerminologyValidator(ValidatorModule):
    """Validate coded values of one coding system against a terminology service.

    Example Usage:
        ```python
        validator = TerminologyValidator(snowstorm_adapter)
        issues = validator.check(document)
        ```
    """

    name = "terminology"

    def __init__(
        self,
        terminology: TerminologyPort,
        target_system: str = SNOMED_SYSTEM,
        max_workers: int = 1
    ):
        """Initialize the validator.

        Parameters:
            terminology: Terminology adapter used for lookups
            target_system: Coding-system URI whose codes are checked
            max_workers: Number of concurrent lookups (1 = sequential)
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.terminology = terminology
        self.target_system = target_system
        self.max_workers = max_workers

    def check(self, document: Node) -> list[Issue]:
        codings = [
            coding for coding in extract_codings(document, self.target_system)
            if not coding.is_blank
        ]
        if not codings:
            return []

        verdicts = self._lookup_all(codings)

        issues: list[Issue] = []
        for coding, ok in zip(codings, verdicts):
            if ok:
                logger.debug(f"Valid code: {coding.code}")
                continue
            logger.info(f"Invalid code detected: {coding.location}")
            issues.append(Issue.error(
                f"{self._label()}: code {coding.code} is not valid according to the terminology service.",
                code=IssueType.CODE_INVALID,
                location=coding.location,
            ))
        return issues

    def _lookup_all(self, codings: list[CodedValue]) -> list[bool]:
        """Look up every coding, preserving extraction order."""
        codes = [coding.code for coding in codings]
        workers = min(self.max_workers, len(codes))
        if workers <= 1:
            return [self.terminology.lookup(code) for code in codes]

        # map() returns results in submission order regardless of completion order
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="terminology-lookup") as executor:
            return list(executor.map(self.terminology.lookup, codes))

    def _label(self) -> str:
        label: Optional[str] = SYSTEM_LABELS.get(self.target_system)
        return label or self.target_system
