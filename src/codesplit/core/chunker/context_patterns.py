"""
Global-context line patterns for different language families.

Provides regex-based detection of import, type-definition and global
constant lines, plus a registry mapping language ids to pattern sets.
All patterns are matched against stripped lines.
"""

import re
from collections.abc import Iterable

from .interfaces import ContextPatternInterface


def _compile(patterns: Iterable[str]) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p) for p in patterns)


class RegexContextPatterns(ContextPatternInterface):
    """Pattern set built from three lists of regular expressions."""

    def __init__(
        self,
        imports: Iterable[str] = (),
        type_definitions: Iterable[str] = (),
        global_declarations: Iterable[str] = (),
    ):
        self._imports = _compile(imports)
        self._type_definitions = _compile(type_definitions)
        self._global_declarations = _compile(global_declarations)

    def is_import(self, line: str) -> bool:
        return any(p.match(line) for p in self._imports)

    def is_type_definition(self, line: str) -> bool:
        return any(p.match(line) for p in self._type_definitions)

    def is_global_declaration(self, line: str) -> bool:
        return any(p.match(line) for p in self._global_declarations)


class NullContextPatterns(ContextPatternInterface):
    """Patterns for languages without a known family: nothing matches."""

    def is_import(self, line: str) -> bool:
        return False

    def is_type_definition(self, line: str) -> bool:
        return False

    def is_global_declaration(self, line: str) -> bool:
        return False


PYTHON_PATTERNS = RegexContextPatterns(
    imports=[r"^import\s", r"^from\s"],
    global_declarations=[r"^[A-Z_][A-Z0-9_]*\s*(:[^=]+)?=(?!=)"],
)

JAVASCRIPT_PATTERNS = RegexContextPatterns(
    imports=[r"^import\s", r"^const\s+\w+\s*=\s*require"],
    global_declarations=[r"^const\s+[A-Z_][A-Z0-9_]*\s*=", r"^let\s+[A-Z_][A-Z0-9_]*\s*="],
)

TYPESCRIPT_PATTERNS = RegexContextPatterns(
    imports=[r"^import\s", r"^const\s+\w+\s*=\s*require"],
    type_definitions=[r"^type\s", r"^interface\s", r"^enum\s"],
    global_declarations=[r"^const\s+[A-Z_][A-Z0-9_]*\s*=", r"^let\s+[A-Z_][A-Z0-9_]*\s*="],
)

JAVA_PATTERNS = RegexContextPatterns(
    imports=[r"^import\s", r"^package\s"],
    type_definitions=[r"^@interface\s"],
    global_declarations=[r"^public\s+static\s+final\s"],
)

CSHARP_PATTERNS = RegexContextPatterns(
    imports=[r"^using\s"],
    type_definitions=[r"^delegate\s"],
    global_declarations=[r"^public\s+const\s", r"^public\s+static\s+readonly\s"],
)

GO_PATTERNS = RegexContextPatterns(imports=[r"^import\s"])

RUST_PATTERNS = RegexContextPatterns(imports=[r"^use\s"])

C_FAMILY_PATTERNS = RegexContextPatterns(
    imports=[r"^#include\s", r"^using\s+namespace\s"],
    global_declarations=[r"^#define\s+[A-Z_][A-Z0-9_]*"],
)

SCALA_PATTERNS = RegexContextPatterns(imports=[r"^import\s", r"^package\s"])


class ContextPatternRegistry:
    """
    Registry for language-family context patterns.

    New languages can be added without modifying existing code.
    """

    def __init__(self):
        self._patterns: dict[str, ContextPatternInterface] = {}
        self._null_patterns = NullContextPatterns()

    def register(
        self, language: str, patterns: ContextPatternInterface
    ) -> "ContextPatternRegistry":
        """
        Register a pattern set for a canonical language id.

        Returns:
            Self for method chaining
        """
        self._patterns[language.lower()] = patterns
        return self

    def get(self, language: str) -> ContextPatternInterface:
        """Get the pattern set for a language (NullContextPatterns if unknown)."""
        return self._patterns.get(language.lower(), self._null_patterns)


def _create_default_pattern_registry() -> ContextPatternRegistry:
    """Create and configure the default context pattern registry."""
    registry = ContextPatternRegistry()
    registry.register("python", PYTHON_PATTERNS)
    registry.register("javascript", JAVASCRIPT_PATTERNS)
    registry.register("jsx", JAVASCRIPT_PATTERNS)
    registry.register("typescript", TYPESCRIPT_PATTERNS)
    registry.register("tsx", TYPESCRIPT_PATTERNS)
    registry.register("java", JAVA_PATTERNS)
    registry.register("csharp", CSHARP_PATTERNS)
    registry.register("go", GO_PATTERNS)
    registry.register("rust", RUST_PATTERNS)
    registry.register("cpp", C_FAMILY_PATTERNS)
    registry.register("c", C_FAMILY_PATTERNS)
    registry.register("scala", SCALA_PATTERNS)
    return registry


# Global default registry
_default_pattern_registry = _create_default_pattern_registry()


def get_pattern_registry() -> ContextPatternRegistry:
    """Get the global default context pattern registry."""
    return _default_pattern_registry
