"""Document Tree - Generic Representation of a Clinical Document.

Parsed JSON documents are deeply nested and heterogeneously typed. Instead of
walking raw dicts everywhere, the domain works on an immutable tagged-union
tree with three node kinds:

    - Leaf: a scalar value (str, int, float, bool or None)
    - Composite: an ordered set of named child nodes (a JSON object)
    - ListNode: an ordered sequence of child nodes (a JSON array)

Architecture:
    - Pure domain model with zero infrastructure dependencies
    - Nodes are frozen dataclasses backed by tuples, so a Document can be
      shared between validator modules without defensive copies
    - Field order of the source JSON is preserved (document order)
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

Scalar = Union[str, int, float, bool, None]

# Key of the field that carries a record's type tag
TYPE_TAG_FIELD = "resourceType"


@dataclass(frozen=True)
class Leaf:
    """Scalar node."""
    value: Scalar = None

    def as_str(self) -> Optional[str]:
        """Return the value if it is a string, otherwise None."""
        return self.value if isinstance(self.value, str) else None


@dataclass(frozen=True)
class Composite:
    """Object node holding named children in document order.

    Attributes:
        fields: Tuple of (name, node) pairs
    """
    fields: tuple[tuple[str, "Node"], ...] = ()

    def get(self, name: str) -> Optional["Node"]:
        """Return the first child with the given name, or None."""
        for key, node in self.fields:
            if key == name:
                return node
        return None

    def get_str(self, name: str) -> Optional[str]:
        """Return a child's value when it is a string leaf, otherwise None."""
        node = self.get(name)
        if isinstance(node, Leaf):
            return node.as_str()
        return None

    def children(self) -> Iterator["Node"]:
        for _, node in self.fields:
            yield node

    @property
    def type_tag(self) -> Optional[str]:
        """Record type of this node (its ``resourceType``), if it is a record."""
        return self.get_str(TYPE_TAG_FIELD)


@dataclass(frozen=True)
class ListNode:
    """Array node."""
    items: tuple["Node", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.items)


Node = Union[Leaf, Composite, ListNode]


def from_json(obj: Any) -> Node:
    """Build a document tree from parsed JSON data.

    Conversion uses an explicit work stack so arbitrarily deep documents do
    not hit the interpreter recursion limit. In practice depth is bounded by
    the ``json`` parser in front of it, which callers reject with
    InvalidDocumentError or HTTP 400.

    Parameters:
        obj: Output of ``json.loads`` (dict, list or scalar)

    Returns:
        Node: Root node of the immutable tree

    Raises:
        TypeError: If obj contains values that cannot appear in JSON
    """
    if not isinstance(obj, (dict, list, tuple)):
        return _leaf(obj)

    root: list[Node] = []
    stack: list[_Frame] = [_Frame(obj, None, None)]
    while stack:
        frame = stack[-1]
        try:
            item = next(frame.pending)
        except StopIteration:
            stack.pop()
            node = frame.build()
            if frame.parent is None:
                root.append(node)
            else:
                frame.parent.add(frame.key, node)
            continue

        key, value = item if frame.is_object else (None, item)
        if isinstance(value, (dict, list, tuple)):
            stack.append(_Frame(value, frame, key))
        else:
            frame.add(key, _leaf(value))

    return root[0]


def _leaf(value: Any) -> Leaf:
    if value is None or isinstance(value, (str, int, float, bool)):
        return Leaf(value)
    raise TypeError(f"Unsupported JSON value of type {type(value).__name__}")


class _Frame:
    """Work item of ``from_json``: a container whose children are being built."""

    def __init__(self, source: Any, parent: Optional["_Frame"], key: Optional[str]):
        self.is_object = isinstance(source, dict)
        self.pending = iter(source.items()) if self.is_object else iter(source)
        self.parent = parent
        self.key = key
        self.built: list = []

    def add(self, key: Optional[str], node: Node) -> None:
        self.built.append((str(key), node) if self.is_object else node)

    def build(self) -> Node:
        if self.is_object:
            return Composite(tuple(self.built))
        return ListNode(tuple(self.built))
