"""
Data models for the chunker module.

Contains the Chunk record returned to callers and the ChunkCandidate
produced by the syntax traverser.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

FALLBACK_NODE_TYPE = "fallback"
DEFAULT_DESCRIPTION = "Code block"


@dataclass(frozen=True)
class Chunk:
    """
    A contiguous range of source lines ready for embedding.

    Attributes:
        content: Chunk text, with context prepended when has_context is True
        start_line: Start line number (1-based)
        end_line: End line number (1-based, inclusive)
        language: Language id the caller asked for
        file_path: Path of the source file, when known
        node_type: Syntax node kind, or 'fallback' for line-window chunks
        has_context: Whether content starts with a context prefix
        description: One-line heuristic summary (e.g. 'Function: main')
        metadata: Extra facts (token_count, part_index, total_parts), read-only
    """

    content: str
    start_line: int
    end_line: int
    language: str
    file_path: Optional[str] = None
    node_type: str = FALLBACK_NODE_TYPE
    has_context: bool = False
    description: str = DEFAULT_DESCRIPTION
    metadata: Mapping = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dict."""
        return {
            "content": self.content,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "language": self.language,
            "file_path": self.file_path,
            "node_type": self.node_type,
            "has_context": self.has_context,
            "description": self.description,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class ChunkCandidate:
    """
    A splittable syntax node found during traversal.

    Rows are 0-based, inclusive, as reported by tree-sitter.
    """

    node_type: str
    start_row: int
    end_row: int
    ancestor_signature: str = ""
