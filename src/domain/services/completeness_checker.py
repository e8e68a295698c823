"""Bundle Completeness Check.

Validator module ensuring that a submitted document is a Bundle and that its
entries include at least one resource of every required type.
"""

import logging
from typing import Iterable, Sequence

from src.domain.constants import BUNDLE_TYPE, REQUIRED_RESOURCE_TYPES
from src.domain.document import Composite, ListNode, Node
from src.domain.enums import IssueType
from src.domain.models import Issue
from src.domain.ports import ValidatorModule

logger = logging.getLogger(__name__)


class CompletenessChecker(ValidatorModule):
    """Check that a Bundle contains every required resource type.

    Emits at most one issue per document:
        - root is not a Bundle: one ERROR naming the required types, and the
          entries are not inspected
        - required types missing: one ERROR listing all of them, in the
          declared order of the required set
    """

    name = "completeness"

    def __init__(self, required_types: Sequence[str] = REQUIRED_RESOURCE_TYPES):
        """Initialize the checker.

        Parameters:
            required_types: Resource types that must each appear at least once.
                Their order is the order used in issue messages.
        """
        # Keep declaration order, drop repeats
        self.required_types: tuple[str, ...] = tuple(dict.fromkeys(required_types))

    def check(self, document: Node) -> list[Issue]:
        if not self._is_bundle(document):
            logger.info("Document root is not a Bundle")
            return [Issue.error(
                "Root resource must be a Bundle containing at least: "
                f"{self._join(self.required_types)}.",
                code=IssueType.STRUCTURE,
            )]

        present = self.present_types(document)
        missing = [t for t in self.required_types if t not in present]
        if not missing:
            return []

        logger.info(f"Bundle is missing required resources: {missing}")
        return [Issue.error(
            f"Bundle is missing required resources: {self._join(missing)}",
            code=IssueType.REQUIRED,
        )]

    def present_types(self, bundle: Composite) -> set[str]:
        """Distinct resource types among the Bundle's entries.

        Entries without a resource (or whose resource has no type) contribute
        nothing.
        """
        present: set[str] = set()
        entries = bundle.get("entry")
        if not isinstance(entries, ListNode):
            return present
        for entry in entries:
            if not isinstance(entry, Composite):
                continue
            resource = entry.get("resource")
            if isinstance(resource, Composite) and resource.type_tag:
                present.add(resource.type_tag)
        return present

    @staticmethod
    def _is_bundle(document: Node) -> bool:
        return isinstance(document, Composite) and document.type_tag == BUNDLE_TYPE

    @staticmethod
    def _join(types: Iterable[str]) -> str:
        return ", ".join(types)
