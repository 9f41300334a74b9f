"""
Language registry for the AST splitter.

Maps language ids (with aliases) to tree-sitter grammars and the node kinds
that become chunk boundaries.
"""

from .grammars import load_grammar
from .models import LanguageConfig
from .registry import LanguageRegistry, get_language_registry

__all__ = [
    "LanguageConfig",
    "LanguageRegistry",
    "get_language_registry",
    "load_grammar",
]
