from __future__ import annotations

"""
Unit tests for the Bundle Tree Model aggregate.

Verifies construction from archive entries and from decoding attempts,
delegation of will_expand to the controller, bulk expansion and lookup.
"""

from conftest import FakeDecoder, FakeEntry, failed, ok

from bundletree.core.services.events import TreeModelListener
from bundletree.core.services.tree_model import TreeModel
from bundletree.domain.asset_models import FieldGraphNode
from bundletree.domain.tree_models import NodeKind


class BusyRecorder(TreeModelListener):
    def __init__(self):
        self.states = []

    def busy_changed(self, busy):
        self.states.append(busy)


def test_from_archive_tracks_decodable_entries():
    decoder = FakeDecoder({b"doc": [ok(1, "Foo")]})
    model = TreeModel.from_archive("bundle", [
        FakeEntry("a/b/file1"),
        FakeEntry("a/b/level.assets", b"doc", is_decodable=True),
        FakeEntry("a/c/file3"),
    ], decoder)

    assert model.root.kind is NodeKind.ROOT
    assert model.root.label == "bundle"
    level = model.find("a", "b", "level.assets")
    assert level is not None
    assert model.unloaded_entries == {level}
    assert model.unloaded_records == set()


def test_from_archive_reports_busy_around_construction():
    recorder = BusyRecorder()
    TreeModel.from_archive("bundle", [FakeEntry("x")], listener=recorder)
    assert recorder.states == [True, False]


def test_from_records_groups_by_type():
    model = TreeModel.from_records("asset", [ok(1, "Texture"), ok(2, "Mesh"), ok(3, "Texture")])

    assert [c.label for c in model.root.children] == ["Mesh", "Texture"]
    assert len(model.unloaded_records) == 3


def test_from_records_places_error_at_scan_position():
    model = TreeModel.from_records("asset", [ok(1, "A"), failed("broken"), ok(2, "B")])

    kinds = [c.kind for c in model.root.children]
    assert kinds == [NodeKind.ERROR, NodeKind.CATEGORY, NodeKind.CATEGORY]
    assert all(n.kind is not NodeKind.ERROR for n in model.unloaded_records)


def test_will_expand_loads_nested_levels():
    field = FieldGraphNode("m_Name", "string", value="x")
    decoder = FakeDecoder({b"doc": [ok(9, "Foo", field)]})
    model = TreeModel.from_archive("bundle", [FakeEntry("e.assets", b"doc", is_decodable=True)], decoder)

    entry = model.find("e.assets")
    assert model.will_expand(entry) is True

    record = model.find("e.assets", "Foo", "Object #9")
    assert model.is_unloaded(record)
    assert model.will_expand(record) is True
    assert [c.label for c in record.children] == ["m_Name"]
    assert not model.is_unloaded(record)


def test_expand_all_resolves_every_deferred_node():
    decoder = FakeDecoder({
        b"one": [ok(1, "Foo"), ok(2, "Bar")],
        b"two": [ok(3, "Foo")],
    })
    model = TreeModel.from_archive("bundle", [
        FakeEntry("x/one.assets", b"one", is_decodable=True),
        FakeEntry("two.assets", b"two", is_decodable=True),
    ], decoder)

    expanded = model.expand_all()

    assert expanded == 5
    assert model.controller.pending == 0
    assert not any(n.kind is NodeKind.PLACEHOLDER for n in model.root.walk())


def test_expand_all_respects_depth():
    decoder = FakeDecoder({b"doc": [ok(1, "Foo")]})
    model = TreeModel.from_archive("bundle", [FakeEntry("e.assets", b"doc", is_decodable=True)], decoder)

    assert model.expand_all(max_depth=1) == 1
    assert len(model.unloaded_records) == 1


def test_find_returns_none_for_missing_path():
    model = TreeModel.from_records("asset", [ok(1, "A")])
    assert model.find("Nope") is None
    assert model.find() is model.root
