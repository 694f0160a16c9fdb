from __future__ import annotations

"""
Unit tests for the Record Category Grouper.

Verifies sorted category attachment, encounter order inside a category,
and the immediate, bucket-free placement of error leaves.
"""

from conftest import failed, ok

from bundletree.core.analysis.category_grouper import add_records
from bundletree.domain.tree_models import NodeKind, TreeNode


def _group(attempts):
    root = TreeNode.root("asset")
    unloaded = []
    grouped = add_records(root, attempts, unloaded.append)
    return root, unloaded, grouped


def test_categories_sorted_with_records_in_encounter_order():
    """Texture, Mesh, Texture -> [Mesh, Texture] with both textures in order."""
    root, unloaded, grouped = _group([ok(1, "Texture"), ok(2, "Mesh"), ok(3, "Texture")])

    assert grouped == 3
    assert [c.label for c in root.children] == ["Mesh", "Texture"]
    assert all(c.kind is NodeKind.CATEGORY for c in root.children)

    texture = root.children[1]
    assert [r.payload.path_id for r in texture.children] == [1, 3]
    assert len(unloaded) == 3


def test_records_start_unloaded_with_placeholder():
    root, unloaded, _ = _group([ok(7, "Foo")])

    record = root.children[0].children[0]
    assert record.kind is NodeKind.RECORD
    assert record.loaded is False
    assert record.is_placeholder_only
    assert unloaded == [record]


def test_failed_record_becomes_error_leaf_without_bucket():
    root, unloaded, grouped = _group([failed("bad type tree")])

    assert grouped == 0
    assert unloaded == []
    assert len(root.children) == 1
    assert root.children[0].kind is NodeKind.ERROR
    assert "bad type tree" in root.children[0].label


def test_error_leaves_keep_scan_order_and_precede_buckets():
    root, unloaded, _ = _group([
        ok(1, "Zeta"),
        failed("first"),
        ok(2, "Alpha"),
        failed("second"),
    ])

    kinds = [c.kind for c in root.children]
    assert kinds == [NodeKind.ERROR, NodeKind.ERROR, NodeKind.CATEGORY, NodeKind.CATEGORY]
    assert [c.label for c in root.children[:2]] == ["first", "second"]
    assert [c.label for c in root.children[2:]] == ["Alpha", "Zeta"]
    assert len(unloaded) == 2


def test_buckets_append_after_existing_children():
    root = TreeNode.root("entry")
    marker = root.add(TreeNode.folder("existing"))

    add_records(root, [ok(1, "B"), ok(2, "A")], lambda n: None)

    assert root.children[0] is marker
    assert [c.label for c in root.children[1:]] == ["A", "B"]


def test_empty_input_adds_nothing():
    root, unloaded, grouped = _group([])
    assert root.children == []
    assert unloaded == []
    assert grouped == 0
