from __future__ import annotations

"""
Record Category Grouper.

Partitions the records of an asset document into category nodes keyed by
their declared type name. Records that cannot be decoded surface as error
leaves at their scan position; categories are attached afterwards, sorted.
"""

import logging
from typing import Callable, Dict, Iterable

from bundletree.domain.asset_models import DecodedRecord, DecodingAttempt
from bundletree.domain.errors import DecodeError
from bundletree.domain.tree_models import NodeKind, TreeNode

logger = logging.getLogger(__name__)


def add_records(
        root: TreeNode,
        attempts: Iterable[DecodingAttempt],
        on_unloaded: Callable[[TreeNode], None],
) -> int:
    """
    Group decoded records below the given container node.

    Error leaves are appended immediately during the scan; category nodes
    are appended only once the scan completes, in type-name order.

    Args:
        root: Container receiving error leaves and category nodes.
        attempts: Decoding attempts, one per record slot.
        on_unloaded: Called with each record node so its fields can be
                     loaded on first expansion.

    Returns:
        int: Number of records successfully grouped.
    """
    categories: Dict[str, TreeNode] = {}
    grouped = 0

    for attempt in attempts:
        try:
            type_name = attempt.discriminant()
        except DecodeError as e:
            logger.warning(f"Can't deserialize object: {e}", exc_info=True)
            root.add(TreeNode.error(e))
            continue

        category = categories.get(type_name)
        if category is None:
            category = TreeNode.category(type_name)
            categories[type_name] = category

        category.add(create_record_node(attempt.record, on_unloaded))
        grouped += 1

    for type_name in sorted(categories):
        root.add(categories[type_name])

    return grouped


def create_record_node(record: DecodedRecord, on_unloaded: Callable[[TreeNode], None]) -> TreeNode:
    """Create an unloaded record node holding a single placeholder."""
    node = TreeNode(NodeKind.RECORD, record.label, payload=record, loaded=False)
    node.add(TreeNode.placeholder())
    on_unloaded(node)
    return node
