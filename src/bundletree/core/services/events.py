from __future__ import annotations

"""
Tree Model Change Notifications.

The tree model emits events to its presentation layer through this small
observer registry. Listeners may implement any subset of the callbacks.
"""

from contextlib import contextmanager
from typing import Iterator, List

from bundletree.domain.tree_models import TreeNode


class TreeModelListener:
    """Base class for presentation-side observers. All callbacks are optional."""

    def subtree_replaced(self, node: TreeNode) -> None:
        """The children of node were discarded and replaced."""

    def busy_changed(self, busy: bool) -> None:
        """A blocking decode step started (True) or finished (False)."""


class ListenerRegistry:
    """Ordered set of listeners receiving tree model events."""

    def __init__(self) -> None:
        self._listeners: List[object] = []

    def subscribe(self, listener: object) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: object) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __len__(self) -> int:
        return len(self._listeners)

    def subtree_replaced(self, node: TreeNode) -> None:
        for listener in list(self._listeners):
            callback = getattr(listener, "subtree_replaced", None)
            if callback is not None:
                callback(node)

    def busy_changed(self, busy: bool) -> None:
        for listener in list(self._listeners):
            callback = getattr(listener, "busy_changed", None)
            if callback is not None:
                callback(busy)

    @contextmanager
    def busy(self) -> Iterator[None]:
        """Bracket a blocking step with busy/idle notifications."""
        self.busy_changed(True)
        try:
            yield
        finally:
            self.busy_changed(False)
