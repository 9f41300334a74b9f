"""
Syntax tree traversal.

Walks a tree-sitter tree in pre-order and reports every node whose kind is
splittable for the language. Traversal always continues into the children of
a reported node, so a class and each of its methods are all reported: the
class first, then its members in document order.
"""

from collections.abc import Callable, Iterable
from typing import Any

from .models import ChunkCandidate

SignatureFn = Callable[[int], str]


class SyntaxTraverser:
    """Pre-order walker producing ChunkCandidates."""

    def __init__(self, node_types: Iterable[str], container_types: Iterable[str] = ()):
        """
        Initialize the traverser.

        Args:
            node_types: Node kinds that become chunk candidates
            container_types: Splittable kinds whose signature is passed down
                to descendants as ancestor context
        """
        self._node_types = frozenset(node_types)
        self._container_types = frozenset(container_types)

    def walk(self, root: Any, signature_of: SignatureFn) -> list[ChunkCandidate]:
        """
        Collect chunk candidates from a syntax tree.

        Iterative, with an explicit stack.

        Args:
            root: tree-sitter root node
            signature_of: Returns the signature text for a 0-based row

        Returns:
            Candidates in pre-order (non-decreasing start row)
        """
        candidates: list[ChunkCandidate] = []
        stack: list[tuple[Any, str]] = [(root, "")]

        while stack:
            node, ancestor = stack.pop()

            if node.type in self._node_types:
                start_row = node.start_point[0]
                end_row = node.end_point[0]
                candidates.append(
                    ChunkCandidate(
                        node_type=node.type,
                        start_row=start_row,
                        end_row=end_row,
                        ancestor_signature=ancestor,
                    )
                )
                if node.type in self._container_types:
                    ancestor = signature_of(start_row)

            # Reversed so the first child is visited first
            for child in reversed(node.children):
                stack.append((child, ancestor))

        return candidates
