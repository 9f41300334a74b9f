"""
Ownership of parsed syntax trees.

Every tree produced by a split call is wrapped in an OwnedTree and disposed
exactly once when the call leaves its parse scope, whether it returns,
raises, or hands off to the fallback splitter.
"""

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Optional

from codesplit.core.errors import TreeDisposedError

logger = logging.getLogger(__name__)


def _release_tree(tree: Any) -> None:
    # Trees without an explicit free are released when the last reference drops
    delete = getattr(tree, "delete", None)
    if callable(delete):
        delete()


class OwnedTree:
    """A parsed tree with a single owner and a one-shot dispose()."""

    def __init__(self, tree: Any, disposer: Callable[[Any], None]):
        self._tree = tree
        self._disposer = disposer
        self._disposed = False
        self._lock = threading.Lock()

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def tree(self) -> Any:
        """The parsed tree; None if the parser produced nothing."""
        if self._disposed:
            raise TreeDisposedError("Syntax tree has already been disposed")
        return self._tree

    @property
    def root_node(self) -> Any:
        return getattr(self.tree, "root_node", None)

    def dispose(self) -> bool:
        """
        Release the native tree.

        Returns:
            True if this call released the tree, False if it was already released

        Raises:
            Exception: Whatever the disposer raises; the handle is still marked
                disposed so the tree is never released twice
        """
        with self._lock:
            if self._disposed:
                return False
            tree, self._tree = self._tree, None
            self._disposed = True
        if tree is not None:
            self._disposer(tree)
        return True


class TreeLifecycleManager:
    """
    Tracks live syntax trees and guarantees their disposal.

    Thread-safe: concurrent split calls each register their own tree.
    """

    def __init__(self, disposer: Optional[Callable[[Any], None]] = None):
        self._disposer = disposer or _release_tree
        self._lock = threading.Lock()
        self._live: dict[int, OwnedTree] = {}

    @property
    def live_count(self) -> int:
        """Number of trees parsed but not yet disposed."""
        with self._lock:
            return len(self._live)

    @contextmanager
    def parse(self, parser: Any, source: bytes) -> Iterator[OwnedTree]:
        """
        Parse source and own the resulting tree for the duration of the block.

        The tree is disposed on exit. A disposal failure is logged and never
        replaces the block's own result or exception.

        Args:
            parser: A tree-sitter parser with its language already set
            source: UTF-8 encoded source text

        Yields:
            OwnedTree wrapping the parsed tree
        """
        owned = OwnedTree(parser.parse(source), self._disposer)
        with self._lock:
            self._live[id(owned)] = owned
        try:
            yield owned
        finally:
            self._dispose(owned)

    def _dispose(self, owned: OwnedTree) -> None:
        with self._lock:
            self._live.pop(id(owned), None)
        try:
            owned.dispose()
        except Exception as e:
            logger.warning(f"Failed to dispose syntax tree: {e}")

    def dispose_all(self) -> int:
        """
        Force-dispose every tree still registered.

        Returns:
            Number of trees that were still live
        """
        with self._lock:
            remaining = list(self._live.values())
            self._live.clear()

        if remaining:
            logger.warning(f"Forcing cleanup of {len(remaining)} remaining syntax trees")
        for owned in remaining:
            try:
                owned.dispose()
            except Exception as e:
                logger.warning(f"Failed to dispose syntax tree during cleanup: {e}")
        return len(remaining)
