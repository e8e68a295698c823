"""Code Extraction Service.

Finds every coded value (FHIR Coding) in a document tree whose coding system
matches a target system URI.

Architecture:
    - Pure domain service with no infrastructure dependencies
    - Explicit recursive-descent traversal over the generic document tree,
      no path-query engine
    - Lazy: codings are yielded as they are found
"""

from typing import Iterator

from src.domain.document import Composite, ListNode, Node
from src.domain.models import CodedValue

SYSTEM_FIELD = "system"
CODE_FIELD = "code"
DISPLAY_FIELD = "display"


def extract_codings(document: Node, target_system: str) -> Iterator[CodedValue]:
    """Yield the coded values of a document that belong to a coding system.

    The whole tree is walked depth-first in document order, so the output is
    deterministic for a fixed input. A composite node counts as a coded value
    when its ``system`` field is a string exactly equal to ``target_system``
    (no prefix or substring matching).

    Parameters:
        document: Root node of the document tree
        target_system: Coding-system URI to match

    Yields:
        CodedValue: Matching coded values; ``code`` is None when the node has
            no string code

    Example:
        ```python
        codes = [c.code for c in extract_codings(tree, "http://snomed.info/sct")]
        ```
    """
    # Explicit stack instead of recursion: documents may be arbitrarily deep
    stack: list[Node] = [document]
    while stack:
        node = stack.pop()
        if isinstance(node, Composite):
            if node.get_str(SYSTEM_FIELD) == target_system:
                yield CodedValue(
                    system=target_system,
                    code=node.get_str(CODE_FIELD),
                    display=node.get_str(DISPLAY_FIELD),
                )
            # Reversed so children pop in document order
            stack.extend(reversed(tuple(node.children())))
        elif isinstance(node, ListNode):
            stack.extend(reversed(node.items))
