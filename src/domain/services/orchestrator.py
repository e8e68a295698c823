"""Validation Orchestrator.

Runs an ordered list of validator modules against a document and aggregates
their issues into one OutcomeReport.

Architecture:
    - Modules are passed in explicitly by the application's startup code
      (see src.main.build_validation_modules); there is no discovery
    - Modules are independent: one stopping early never prevents the next
      from running
    - Issue order: module registration order, then emission order
"""

import logging
from typing import Optional, Sequence

from src.domain.document import Node
from src.domain.models import Issue, OutcomeReport
from src.domain.ports import InvalidDocumentError, ValidatorModule

logger = logging.getLogger(__name__)


def run_modules(document: Optional[Node], modules: Sequence[ValidatorModule]) -> OutcomeReport:
    """Run validator modules over a document in order.

    Parameters:
        document: Root node of the document tree
        modules: Validator modules, in the order they must run

    Returns:
        OutcomeReport: All issues from all modules

    Raises:
        InvalidDocumentError: If document is None
    """
    if document is None:
        raise InvalidDocumentError("Cannot validate a missing document")

    issues: list[Issue] = []
    for module in modules:
        module_issues = module.check(document)
        logger.debug(f"Module '{module.name}' reported {len(module_issues)} issue(s)")
        issues.extend(module_issues)

    return OutcomeReport(issues=tuple(issues))


class ValidationOrchestrator:
    """Validate documents with a fixed, ordered set of modules.

    Example Usage:
        ```python
        orchestrator = ValidationOrchestrator([
            CompletenessChecker(),
            TerminologyValidator(adapter),
        ])
        report = orchestrator.validate(document)
        if report.is_successful:
            ...
        ```
    """

    def __init__(self, modules: Sequence[ValidatorModule]):
        """Initialize the orchestrator.

        Parameters:
            modules: Validator modules, in the order they must run
        """
        self.modules: tuple[ValidatorModule, ...] = tuple(modules)

    def validate(self, document: Optional[Node]) -> OutcomeReport:
        """Validate a document with every registered module.

        Parameters:
            document: Root node of the document tree

        Returns:
            OutcomeReport: Aggregated issues; empty means the document is valid
        """
        report = run_modules(document, self.modules)
        logger.info(
            f"Validation finished: {len(report.issues)} issue(s) "
            f"from {len(self.modules)} module(s)"
        )
        return report
