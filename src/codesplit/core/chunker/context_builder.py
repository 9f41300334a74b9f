"""
Context prefixes for AST chunks.

A chunk cut out of a file loses what surrounded it. Three blocks restore some
of that for the embedding model:

- global context: import, type and constant lines from the head of the file
- ancestor context: the signature line of the enclosing class-like node
- surrounding context: the few non-blank lines right above the chunk

Extraction is heuristic and best-effort; it never decides which chunks exist.
"""

import re
from typing import Optional

from codesplit.core.languages import LanguageConfig

from .context_patterns import ContextPatternRegistry, get_pattern_registry

# Global-context scanning stops once the file's main content begins
MAIN_CONTENT_START = re.compile(
    r"^(?:export\s+(?:default\s+)?)?(?:class|function|def|interface|struct|enum)\b"
)

BLOCK_OPEN = "{"


class ContextBuilder:
    """Builds the context prefix prepended to a chunk."""

    def __init__(
        self,
        context_lines: int = 3,
        pattern_registry: Optional[ContextPatternRegistry] = None,
    ):
        """
        Initialize the ContextBuilder.

        Args:
            context_lines: Lines above a chunk to scan for surrounding context
            pattern_registry: Registry of global-context patterns (uses default if None)
        """
        if context_lines < 0:
            raise ValueError(f"context_lines must not be negative, got {context_lines}")
        self._context_lines = context_lines
        self._patterns = pattern_registry or get_pattern_registry()

    @property
    def context_lines(self) -> int:
        return self._context_lines

    @context_lines.setter
    def context_lines(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"context_lines must not be negative, got {value}")
        self._context_lines = value

    def extract_global_context(self, lines: list[str], language: str) -> str:
        """
        Collect import, type and constant lines from the top of a file.

        Scanning stops after the first line that starts the main content
        (a class, function, interface, struct or enum declaration).

        Args:
            lines: Source split into lines
            language: Canonical language id selecting the pattern set

        Returns:
            Matching lines joined with newlines (empty when none match)
        """
        patterns = self._patterns.get(language)
        collected = []

        for line in lines:
            stripped = line.strip()
            if (
                patterns.is_import(stripped)
                or patterns.is_type_definition(stripped)
                or patterns.is_global_declaration(stripped)
            ):
                collected.append(line)

            if MAIN_CONTENT_START.match(stripped):
                break

        return "\n".join(collected)

    def extract_signature(self, lines: list[str], row: int) -> str:
        """
        Get the signature line of a container node.

        The line is cut just after its first block-opening brace, so
        ``class Foo extends Bar {  // note`` becomes ``class Foo extends Bar {``.
        """
        if row < 0 or row >= len(lines):
            return ""
        line = lines[row]
        brace = line.find(BLOCK_OPEN)
        if brace != -1:
            line = line[: brace + 1]
        return line.rstrip()

    def surrounding_context(
        self,
        lines: list[str],
        start_row: int,
        comment_prefix: str = "//",
        ancestor: str = "",
        global_context: str = "",
    ) -> str:
        """
        Render the non-blank lines just above start_row as a context block.

        Lines already carried by the ancestor signature or the global context
        are skipped.
        """
        if self._context_lines <= 0 or start_row <= 0:
            return ""

        window_start = max(0, start_row - self._context_lines)
        seen = {line.strip() for line in global_context.split("\n")}
        seen.add(ancestor.strip())
        kept = [
            line
            for line in lines[window_start:start_row]
            if line.strip() and line.strip() not in seen
        ]
        if not kept:
            return ""
        return f"{comment_prefix} Context:\n" + "\n".join(kept)

    def build(
        self,
        config: LanguageConfig,
        global_context: str,
        ancestor: str,
        lines: list[str],
        start_row: int,
    ) -> str:
        """
        Assemble the full context prefix for one chunk.

        Returns:
            Context text, or an empty string when there is nothing to add
        """
        parts = []

        if not config.global_context:
            global_context = ""
        if global_context:
            parts.append(global_context)

        if ancestor:
            parts.append(ancestor)

        surrounding = self.surrounding_context(
            lines,
            start_row,
            comment_prefix=config.comment_prefix,
            ancestor=ancestor,
            global_context=global_context,
        )
        if surrounding:
            parts.append(surrounding)

        return "\n".join(parts)
