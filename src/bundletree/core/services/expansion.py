from __future__ import annotations

"""
Lazy Expansion Controller.

Tracks bundle entries and records whose children are deferred behind a
placeholder, and performs the one-way Unloaded -> Loaded transition when
the presentation layer is about to expand one of them.
"""

import logging
from typing import Optional, Set

from bundletree.core.analysis.category_grouper import add_records
from bundletree.core.analysis.field_flattener import convert_record_fields
from bundletree.core.services.events import ListenerRegistry
from bundletree.domain.asset_models import RecordDecoder
from bundletree.domain.errors import DecodeError
from bundletree.domain.tree_models import TreeNode

logger = logging.getLogger(__name__)


class LazyExpansionController:
    """
    State machine for deferred subtrees.

    Membership in one of the two unloaded sets is the Unloaded state;
    a node leaves its set exactly once, when it is expanded.
    """

    def __init__(self, decoder: Optional[RecordDecoder], events: ListenerRegistry) -> None:
        """
        Args:
            decoder: Decoder used for bundle entries. May be None when the
                     model never holds decodable entries.
            events: Registry notified of busy state and subtree changes.
        """
        self._decoder = decoder
        self._events = events
        self.unloaded_entries: Set[TreeNode] = set()
        self.unloaded_records: Set[TreeNode] = set()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def mark_entry(self, node: TreeNode) -> None:
        self.unloaded_entries.add(node)

    def mark_record(self, node: TreeNode) -> None:
        self.unloaded_records.add(node)

    def is_unloaded(self, node: TreeNode) -> bool:
        return node in self.unloaded_entries or node in self.unloaded_records

    @property
    def pending(self) -> int:
        return len(self.unloaded_entries) + len(self.unloaded_records)

    # -------------------------------------------------------------------------
    # Transition
    # -------------------------------------------------------------------------

    def expand(self, node: TreeNode) -> bool:
        """
        Load the deferred children of node.

        Args:
            node: Node the presentation layer is about to expand.

        Returns:
            bool: True if a transition happened, False for nodes that are
                  already loaded or were never deferred.
        """
        if node in self.unloaded_entries:
            unloaded, load = self.unloaded_entries, self._load_entry
        elif node in self.unloaded_records:
            unloaded, load = self.unloaded_records, self._load_record
        else:
            return False

        # The transition is one-way even if loading raises
        try:
            load(node)
        finally:
            unloaded.discard(node)
            node.loaded = True

        self._events.subtree_replaced(node)
        return True

    def _load_entry(self, node: TreeNode) -> None:
        entry = node.payload
        node.remove_all_children()

        logger.debug(f"Lazy-loading asset for entry {entry.name}")

        try:
            with self._events.busy():
                if self._decoder is None:
                    raise DecodeError("No decoder available", source=entry.name)
                document = self._decoder.decode(entry.read_bytes(), source=entry.name)
                add_records(node, document.list_records(), self.mark_record)
        except DecodeError as e:
            logger.warning(f"Can't load asset: {e}", exc_info=True)
            node.add(TreeNode.error(e))

    def _load_record(self, node: TreeNode) -> None:
        record = node.payload

        logger.debug(f"Lazy-loading object {record.path_id} ({record.type_name})")

        node.remove_all_children()
        try:
            children = convert_record_fields(record.root)
        except RecursionError:
            error = DecodeError("Field graph is nested too deeply", source=record.label)
            logger.warning(f"Can't convert object: {error}")
            node.add(TreeNode.error(error))
            return

        for child in children:
            node.add(child)
