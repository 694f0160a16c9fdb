from __future__ import annotations

"""
Browsable Tree Data Models.

Provides the tagged tree node used to present bundles, asset documents,
records and their fields. Every node is exclusively owned by its parent;
insertion order of children is display order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

class NodeKind(Enum):
    """Variant tag of a TreeNode."""
    ROOT = "root"
    FOLDER = "folder"
    ENTRY = "entry"
    CATEGORY = "category"
    RECORD = "record"
    FIELD = "field"
    VALUE = "value"
    ERROR = "error"
    PLACEHOLDER = "placeholder"


# Kinds whose children may be deferred until first expansion
LAZY_KINDS = (NodeKind.ENTRY, NodeKind.RECORD)


@dataclass(eq=False)
class TreeNode:
    """
    A node of the browsable tree.

    Nodes compare and hash by identity so they can be tracked in sets
    while their children are being replaced.

    Attributes:
        kind: Variant tag deciding how the payload is interpreted.
        label: Display text of the node.
        payload: ArchiveEntry (ENTRY), DecodedRecord (RECORD),
                 FieldGraphNode (FIELD), raw scalar (VALUE) or the
                 exception (ERROR). None for the remaining kinds.
        loaded: False while an ENTRY/RECORD still waits for expansion.
        children: Ordered child nodes.
        parent: Owning node, None for detached nodes and the root.
    """
    kind: NodeKind
    label: str = ""
    payload: Any = None
    loaded: bool = True
    children: List["TreeNode"] = field(default_factory=list, repr=False)
    parent: Optional["TreeNode"] = field(default=None, repr=False)

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def root(cls, label: str) -> "TreeNode":
        return cls(NodeKind.ROOT, label)

    @classmethod
    def folder(cls, name: str) -> "TreeNode":
        return cls(NodeKind.FOLDER, name)

    @classmethod
    def category(cls, name: str) -> "TreeNode":
        return cls(NodeKind.CATEGORY, name)

    @classmethod
    def placeholder(cls) -> "TreeNode":
        return cls(NodeKind.PLACEHOLDER)

    @classmethod
    def error(cls, exc: BaseException) -> "TreeNode":
        return cls(NodeKind.ERROR, str(exc) or type(exc).__name__, payload=exc)

    @classmethod
    def value(cls, raw: Any) -> "TreeNode":
        return cls(NodeKind.VALUE, str(raw), payload=raw)

    # -------------------------------------------------------------------------
    # Child management
    # -------------------------------------------------------------------------

    def add(self, child: "TreeNode") -> "TreeNode":
        """Append a child, taking ownership of it. Returns the child."""
        if child.parent is not None:
            raise ValueError(f"Node '{child.label}' already has a parent")
        child.parent = self
        self.children.append(child)
        return child

    def remove_all_children(self) -> None:
        for child in self.children:
            child.parent = None
        self.children = []

    def find_child(self, kind: NodeKind, label: str) -> Optional["TreeNode"]:
        """Linear scan for the first child with the given kind and label."""
        for child in self.children:
            if child.kind is kind and child.label == label:
                return child
        return None

    def __iter__(self) -> Iterator["TreeNode"]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def is_placeholder_only(self) -> bool:
        return len(self.children) == 1 and self.children[0].kind is NodeKind.PLACEHOLDER

    def path(self) -> List[str]:
        """Labels from the root down to this node."""
        labels: List[str] = []
        node: Optional[TreeNode] = self
        while node is not None:
            labels.append(node.label)
            node = node.parent
        return list(reversed(labels))

    def walk(self) -> Iterator["TreeNode"]:
        """Depth-first, pre-order traversal including this node."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the subtree into plain JSON-compatible structures."""
        data: Dict[str, Any] = {"kind": self.kind.value, "label": self.label}
        if self.kind in LAZY_KINDS:
            data["loaded"] = self.loaded
        if self.kind is NodeKind.FIELD and self.payload is not None:
            data["type"] = self.payload.type_name
            data["value_kind"] = self.payload.value_kind.value
            if data["value_kind"] == "scalar":
                data["value"] = _json_scalar(self.payload.value)
        if self.kind is NodeKind.VALUE:
            data["value"] = _json_scalar(self.payload)
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


def _json_scalar(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)
