from __future__ import annotations

"""
Bundle Folder Synthesizer.

Builds an implicit directory hierarchy out of the flat, slash-delimited
entry names of a bundle. Folder nodes are shared between entries with a
common prefix; entries are attached in archive order.
"""

import logging
from typing import Callable, Iterable

from bundletree.domain.asset_models import ArchiveEntry
from bundletree.domain.constants import PATH_SEPARATOR
from bundletree.domain.tree_models import NodeKind, TreeNode

logger = logging.getLogger(__name__)

UnloadedHook = Callable[[TreeNode], None]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def add_archive_entries(
        root: TreeNode,
        entries: Iterable[ArchiveEntry],
        on_unloaded: UnloadedHook,
) -> int:
    """
    Attach every entry of a bundle below the given container node.

    Args:
        root: Container receiving the synthesized folders and entries.
        entries: Archive entries, processed in the given order.
        on_unloaded: Called with each decodable entry node so its
                     children can be loaded on first expansion.

    Returns:
        int: Number of entries attached.
    """
    count = 0
    for entry in entries:
        parts = entry.name.split(PATH_SEPARATOR)

        # Descend through (or create) the folder chain for all but the last part
        current = root
        for folder_name in parts[:-1]:
            current = _get_or_create_folder(current, folder_name)

        current.add(create_entry_node(entry, parts[-1], on_unloaded))
        count += 1

    logger.debug(f"Attached {count} bundle entries below '{root.label}'")
    return count


def create_entry_node(entry: ArchiveEntry, label: str, on_unloaded: UnloadedHook) -> TreeNode:
    """
    Create the node for a single entry.

    Decodable entries start unloaded with a single placeholder child.
    """
    node = TreeNode(NodeKind.ENTRY, label, payload=entry)
    if entry.is_decodable:
        node.loaded = False
        node.add(TreeNode.placeholder())
        on_unloaded(node)
    return node

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _get_or_create_folder(current: TreeNode, folder_name: str) -> TreeNode:
    """Return the existing folder child named folder_name, creating it if absent."""
    folder = current.find_child(NodeKind.FOLDER, folder_name)
    if folder is None:
        folder = current.add(TreeNode.folder(folder_name))
    return folder
