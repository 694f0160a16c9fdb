from __future__ import annotations

"""
Unit tests for the browsable tree node.

Verifies:
1. Identity-based hashing (nodes stay trackable while children change).
2. Parent ownership rules of add/remove_all_children.
3. Path, traversal and JSON serialization helpers.
"""

import pytest

from bundletree.domain.asset_models import FieldGraphNode
from bundletree.domain.tree_models import NodeKind, TreeNode


def test_nodes_hash_by_identity():
    """Two structurally equal nodes are distinct set members."""
    a = TreeNode.folder("x")
    b = TreeNode.folder("x")

    tracked = {a}
    assert a in tracked
    assert b not in tracked

    a.add(TreeNode.placeholder())
    assert a in tracked


def test_add_sets_parent_and_rejects_second_owner():
    parent = TreeNode.root("r")
    child = parent.add(TreeNode.folder("f"))

    assert child.parent is parent
    assert parent.children == [child]

    with pytest.raises(ValueError):
        TreeNode.root("other").add(child)


def test_remove_all_children_detaches():
    parent = TreeNode.root("r")
    child = parent.add(TreeNode.placeholder())

    parent.remove_all_children()

    assert len(parent) == 0
    assert child.parent is None


def test_path_and_walk():
    root = TreeNode.root("bundle")
    folder = root.add(TreeNode.folder("a"))
    leaf = folder.add(TreeNode.folder("b"))

    assert leaf.path() == ["bundle", "a", "b"]
    assert [n.label for n in root.walk()] == ["bundle", "a", "b"]


def test_is_placeholder_only():
    node = TreeNode(NodeKind.ENTRY, "e", loaded=False)
    node.add(TreeNode.placeholder())
    assert node.is_placeholder_only

    node.add(TreeNode.folder("x"))
    assert not node.is_placeholder_only


def test_error_node_keeps_exception():
    exc = RuntimeError("boom")
    node = TreeNode.error(exc)

    assert node.kind is NodeKind.ERROR
    assert node.label == "boom"
    assert node.payload is exc


def test_to_dict_describes_fields_and_values():
    field = TreeNode(NodeKind.FIELD, "m_Width", payload=FieldGraphNode("m_Width", "int", value=256))
    seq = TreeNode(NodeKind.FIELD, "m_List", payload=FieldGraphNode("m_List", "array", value=[1]))
    seq.add(TreeNode.value(1))

    assert field.to_dict() == {
        "kind": "field",
        "label": "m_Width",
        "type": "int",
        "value_kind": "scalar",
        "value": 256,
    }
    data = seq.to_dict()
    assert data["value_kind"] == "sequence"
    assert data["children"] == [{"kind": "value", "label": "1", "value": 1}]


def test_to_dict_reports_loaded_flag_for_lazy_kinds():
    node = TreeNode(NodeKind.RECORD, "Object #1", loaded=False)
    node.add(TreeNode.placeholder())

    data = node.to_dict()
    assert data["loaded"] is False
    assert data["children"][0]["kind"] == "placeholder"
