"""Domain layer for Bundle-Sentinel.

This module contains the core validation logic: the document tree, the
validation models and the validator modules. All domain code is pure Python
with no external dependencies beyond Pydantic.
"""

from .document import Composite, Leaf, ListNode, Node, from_json
from .models import CodedValue, Issue, OutcomeReport

__all__ = [
    "Composite",
    "Leaf",
    "ListNode",
    "Node",
    "from_json",
    "CodedValue",
    "Issue",
    "OutcomeReport",
]
