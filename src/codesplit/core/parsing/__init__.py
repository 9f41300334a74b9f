"""
Parser resources: the bounded parser pool and syntax tree ownership.
"""

from .pool import ParserPool
from .tree_lifecycle import OwnedTree, TreeLifecycleManager

__all__ = [
    "ParserPool",
    "OwnedTree",
    "TreeLifecycleManager",
]
