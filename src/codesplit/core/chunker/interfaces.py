"""
Abstract interfaces for the chunker module.

Contains SplitterInterface and ContextPatternInterface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .models import Chunk


class SplitterInterface(ABC):
    """Abstract interface for turning source text into chunks."""

    @abstractmethod
    def split(
        self, source_text: str, language_id: str, file_path: Optional[str] = None
    ) -> list[Chunk]:
        """
        Split source text into chunks.

        Args:
            source_text: Full file content
            language_id: Language id or alias (case-insensitive)
            file_path: Optional path recorded on every chunk

        Returns:
            Chunks ordered by start line; empty when nothing qualifies

        Notes:
            - Never raises for unsupported languages or unparsable input
            - Falls back to line-window splitting when AST splitting fails
        """
        pass

    @abstractmethod
    def set_chunk_size(self, chunk_size: int) -> None:
        """Set the fallback window size in characters."""
        pass

    @abstractmethod
    def set_chunk_overlap(self, chunk_overlap: int) -> None:
        """Set the fallback window overlap in characters."""
        pass


class ContextPatternInterface(ABC):
    """Language-family patterns used to collect global context lines."""

    @abstractmethod
    def is_import(self, line: str) -> bool:
        """Return True for import/include/use statements."""
        pass

    @abstractmethod
    def is_type_definition(self, line: str) -> bool:
        """Return True for top-level type declarations."""
        pass

    @abstractmethod
    def is_global_declaration(self, line: str) -> bool:
        """Return True for global constant declarations."""
        pass
