from __future__ import annotations

"""
Field Graph Flattener.

Recursively converts a record's typed field graph into tree nodes.
Reference-valued fields collapse into the representation of their
referent; sequence elements become children of the field node.
"""

from typing import List

from bundletree.domain.asset_models import FieldGraphNode, Reference
from bundletree.domain.tree_models import NodeKind, TreeNode


def convert_field(field: FieldGraphNode) -> TreeNode:
    """
    Build the subtree representing a field-graph node.

    The input graph is not mutated and no state is shared between calls,
    so repeated conversions of the same field yield equivalent subtrees.
    The graph is expected to be acyclic.

    Args:
        field: Field-graph node to convert.

    Returns:
        TreeNode: Newly created subtree root.
    """
    value = field.value

    if isinstance(value, Reference):
        tree_node = convert_field(value.target)
    elif isinstance(value, (list, tuple)):
        tree_node = _field_node(field)
        for item in value:
            if isinstance(item, FieldGraphNode):
                tree_node.add(convert_field(item))
            else:
                tree_node.add(TreeNode.value(item))
    else:
        tree_node = _field_node(field)

    # Declared children follow any value-derived children
    for child in field.children:
        tree_node.add(convert_field(child))

    return tree_node


def convert_record_fields(root: FieldGraphNode) -> List[TreeNode]:
    """Convert each declared child of a record's root field."""
    return [convert_field(child) for child in root.children]


def _field_node(field: FieldGraphNode) -> TreeNode:
    return TreeNode(NodeKind.FIELD, field.name, payload=field)
