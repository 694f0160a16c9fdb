from __future__ import annotations

"""
Tree Renderer.

Converts the browsable tree into an ASCII representation for terminal
output. Deferred subtrees are shown as a single marker line.
"""

from typing import List

from bundletree.domain.asset_models import ValueKind
from bundletree.domain.constants import UNLOADED_MARKER
from bundletree.domain.tree_models import NodeKind, TreeNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree(
        root: TreeNode,
        show_types: bool = True,
        max_value_length: int = 80,
) -> List[str]:
    """
    Render a tree, root line first.

    Args:
        root: Node to render together with its subtree.
        show_types: Append declared field types.
        max_value_length: Truncate scalar values beyond this length (0 = never).

    Returns:
        List[str]: Visual lines of the tree.
    """
    lines = [format_label(root, show_types, max_value_length)]
    render_tree_structure(root, lines, "", show_types, max_value_length)
    return lines


def render_tree_structure(
        node: TreeNode,
        lines: List[str],
        prefix: str = "",
        show_types: bool = True,
        max_value_length: int = 80,
) -> None:
    """
    Recursively append the children of node to lines.

    Uses standard ASCII connectors (├──, └──) and manages indentation
    levels for nested nodes.
    """
    total = len(node.children)
    for i, child in enumerate(node.children):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{format_label(child, show_types, max_value_length)}")

        if child.children:
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_tree_structure(child, lines, new_prefix, show_types, max_value_length)


def format_label(node: TreeNode, show_types: bool = True, max_value_length: int = 80) -> str:
    """Display text of a single node."""
    kind = node.kind

    if kind is NodeKind.PLACEHOLDER:
        return UNLOADED_MARKER
    if kind is NodeKind.FOLDER:
        return f"{node.label}/"
    if kind is NodeKind.CATEGORY:
        return f"{node.label} ({len(node.children)})"
    if kind is NodeKind.ERROR:
        return f"[error] {node.label}"
    if kind is NodeKind.VALUE:
        return _truncate(repr(node.payload), max_value_length)
    if kind is NodeKind.FIELD:
        return _format_field(node, show_types, max_value_length)
    return node.label

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _format_field(node: TreeNode, show_types: bool, max_value_length: int) -> str:
    field = node.payload
    text = node.label
    if show_types and field.type_name:
        text += f" ({field.type_name})"

    kind = field.value_kind
    if kind is ValueKind.SCALAR:
        text += " = " + _truncate(repr(field.value), max_value_length)
    elif kind is ValueKind.SEQUENCE:
        text += f" [{len(field.value)}]"
    return text


def _truncate(text: str, limit: int) -> str:
    if limit and len(text) > limit:
        return text[:max(limit - 1, 0)] + "…"
    return text
