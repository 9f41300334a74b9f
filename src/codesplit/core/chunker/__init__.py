"""
Chunker module for codesplit.

Provides AST-based chunking with context prefixes and a line-window
fallback for unsupported languages.
"""

from .assembler import ChunkAssembler, describe
from .context_builder import ContextBuilder
from .context_patterns import (
    ContextPatternRegistry,
    NullContextPatterns,
    RegexContextPatterns,
    get_pattern_registry,
)
from .fallback import LineWindowSplitter
from .interfaces import ContextPatternInterface, SplitterInterface
from .models import DEFAULT_DESCRIPTION, FALLBACK_NODE_TYPE, Chunk, ChunkCandidate
from .smart_splitter import SmartChunkSplitter
from .splitter import AstSplitter, create_splitter
from .traverser import SyntaxTraverser

__all__ = [
    # Main classes
    "AstSplitter",
    "SplitterInterface",
    "Chunk",
    "ChunkCandidate",
    "FALLBACK_NODE_TYPE",
    "DEFAULT_DESCRIPTION",
    # Pipeline stages
    "SyntaxTraverser",
    "ContextBuilder",
    "ChunkAssembler",
    "LineWindowSplitter",
    "SmartChunkSplitter",
    "describe",
    # Context patterns
    "ContextPatternInterface",
    "ContextPatternRegistry",
    "RegexContextPatterns",
    "NullContextPatterns",
    "get_pattern_registry",
    # Factory
    "create_splitter",
]
