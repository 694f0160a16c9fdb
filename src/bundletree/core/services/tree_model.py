from __future__ import annotations

"""
Bundle Tree Model.

Aggregate owning the root of the browsable tree, the lazy expansion
controller (and with it the unloaded-node bookkeeping) and the listeners
of the presentation layer. Construction attaches either the entries of a
bundle or the records of a single asset document; everything below is
populated on demand through will_expand().
"""

import logging
import os
from typing import Any, Dict, Iterable, Optional, Set

from bundletree.core.analysis.category_grouper import add_records
from bundletree.core.analysis.folder_synthesizer import add_archive_entries
from bundletree.core.services.events import ListenerRegistry
from bundletree.core.services.expansion import LazyExpansionController
from bundletree.domain.asset_models import ArchiveEntry, DecodingAttempt, RecordDecoder
from bundletree.domain.config import get_default_config
from bundletree.domain.errors import DecodeError
from bundletree.domain.tree_models import NodeKind, TreeNode
from bundletree.infra.archive.zip_reader import ZipBundleReader, is_bundle
from bundletree.infra.decoding.json_decoder import JsonAssetDecoder, load_asset_file

logger = logging.getLogger(__name__)


class TreeModel:
    """
    Mutable tree shared with a presentation layer.

    The model is mutated only during construction and from will_expand();
    listeners are told about every replaced subtree.
    """

    def __init__(self, root_label: str, decoder: Optional[RecordDecoder] = None) -> None:
        self.root = TreeNode.root(root_label)
        self.events = ListenerRegistry()
        self.controller = LazyExpansionController(decoder, self.events)

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def from_archive(
            cls,
            root_label: str,
            entries: Iterable[ArchiveEntry],
            decoder: Optional[RecordDecoder] = None,
            listener: Any = None,
    ) -> "TreeModel":
        """Build a model whose root holds the entries of a bundle."""
        model = cls(root_label, decoder)
        if listener is not None:
            model.subscribe(listener)
        with model.events.busy():
            count = add_archive_entries(model.root, entries, model.controller.mark_entry)
        logger.info(f"Loaded bundle '{root_label}': {count} entries, "
                    f"{len(model.unloaded_entries)} decodable")
        return model

    @classmethod
    def from_records(
            cls,
            root_label: str,
            attempts: Iterable[DecodingAttempt],
            listener: Any = None,
    ) -> "TreeModel":
        """Build a model whose root holds the records of one asset document."""
        model = cls(root_label)
        if listener is not None:
            model.subscribe(listener)
        with model.events.busy():
            count = add_records(model.root, attempts, model.controller.mark_record)
        logger.info(f"Loaded asset '{root_label}': {count} objects")
        return model

    @classmethod
    def from_path(
            cls,
            path: str,
            config: Optional[Dict[str, Any]] = None,
            listener: Any = None,
    ) -> "TreeModel":
        """
        Open a file from disk: a ZIP bundle, or otherwise a single asset document.

        Raises:
            ArchiveOpenError: If the file cannot be opened at all.
        """
        cfg = config or get_default_config()
        label = os.path.basename(path) or path
        decoder = JsonAssetDecoder()

        if is_bundle(path):
            with ZipBundleReader(path, cfg.get("decodable_extensions")) as reader:
                return cls.from_archive(label, reader, decoder, listener=listener)

        try:
            document = load_asset_file(path, decoder)
        except DecodeError as e:
            logger.warning(f"Can't load asset file: {e}", exc_info=True)
            model = cls(label, decoder)
            if listener is not None:
                model.subscribe(listener)
            model.root.add(TreeNode.error(e))
            return model

        return cls.from_records(label, document.list_records(), listener=listener)

    # -------------------------------------------------------------------------
    # Presentation interface
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Any) -> None:
        self.events.subscribe(listener)

    def unsubscribe(self, listener: Any) -> None:
        self.events.unsubscribe(listener)

    def will_expand(self, node: TreeNode) -> bool:
        """
        Entry point for "about to expand" notifications.

        Returns:
            bool: True if deferred children were loaded by this call.
        """
        return self.controller.expand(node)

    def expand_all(self, max_depth: int = 0) -> int:
        """
        Expand every deferred node, including those revealed by expansion.

        Args:
            max_depth: Only expand nodes at most this deep below the root
                       (root children are depth 1). 0 means unlimited.

        Returns:
            int: Number of nodes expanded.
        """
        expanded = 0
        stack = [(child, 1) for child in reversed(self.root.children)]
        while stack:
            node, depth = stack.pop()
            if max_depth and depth > max_depth:
                continue
            if self.will_expand(node):
                expanded += 1
            stack.extend((child, depth + 1) for child in reversed(node.children))
        return expanded

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def unloaded_entries(self) -> Set[TreeNode]:
        return self.controller.unloaded_entries

    @property
    def unloaded_records(self) -> Set[TreeNode]:
        return self.controller.unloaded_records

    def is_unloaded(self, node: TreeNode) -> bool:
        return self.controller.is_unloaded(node)

    def find(self, *labels: str) -> Optional[TreeNode]:
        """Follow a chain of child labels from the root, skipping placeholders."""
        node = self.root
        for label in labels:
            match = None
            for child in node.children:
                if child.kind is not NodeKind.PLACEHOLDER and child.label == label:
                    match = child
                    break
            if match is None:
                return None
            node = match
        return node
