"""
Data models for the language registry.
"""

from dataclasses import dataclass, field
from typing import Any

from .grammars import load_grammar


@dataclass(frozen=True)
class LanguageConfig:
    """
    Everything the splitter needs to know about one language.

    Attributes:
        name: Canonical language id (e.g. 'typescript')
        grammar_module: Importable tree-sitter grammar package
        grammar_function: Function in the grammar package returning the language
        node_types: Splittable node kinds, in table order
        container_types: Splittable kinds whose signature is passed to descendants
        aliases: Additional ids that resolve to this entry
        extensions: File suffixes used for language detection
        comment_prefix: Line comment marker used when rendering context
        global_context: Whether import/type/constant lines are prepended to chunks
    """

    name: str
    grammar_module: str
    node_types: tuple[str, ...]
    grammar_function: str = "language"
    container_types: frozenset[str] = field(default_factory=frozenset)
    aliases: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()
    comment_prefix: str = "//"
    global_context: bool = False

    @property
    def grammar(self) -> Any:
        """The tree-sitter Language for this entry, loaded on first use."""
        return load_grammar(self.grammar_module, self.grammar_function)
