"""
Chunk assembly.

Turns traverser candidates into Chunk records: slices the source lines,
prepends context, drops noise below a minimum size, splits chunks that
exceed the token budget and attaches a one-line description.
"""

import logging
import re
from typing import Optional

from codesplit.core.tokenizer import TokenizerInterface

from .models import DEFAULT_DESCRIPTION, Chunk, ChunkCandidate
from .smart_splitter import SmartChunkSplitter

logger = logging.getLogger(__name__)

# Probed in order against the first non-blank line of a node
DESCRIPTION_PROBES = [
    (re.compile(r"\b(?:function|def|func|fn)\s+(\w+)"), "Function"),
    (re.compile(r"\bclass\s+(\w+)"), "Class"),
    (re.compile(r"\binterface\s+(\w+)"), "Interface"),
    (re.compile(r"\b(?:struct|trait)\s+(\w+)"), "Struct"),
]

CONTEXT_SEPARATOR = "\n\n"


def describe(text: str) -> str:
    """
    Produce a best-effort one-line description of a code block.

    >>> describe("async def fetch(url):")
    'Function: fetch'
    >>> describe("x = 1")
    'Code block'
    """
    first_line = next((line for line in text.split("\n") if line.strip()), "")
    for pattern, label in DESCRIPTION_PROBES:
        match = pattern.search(first_line)
        if match:
            return f"{label}: {match.group(1)}"
    return DEFAULT_DESCRIPTION


class ChunkAssembler:
    """
    Builds Chunk records from candidates.

    Deterministic and free of I/O: the same lines, candidates and contexts
    always produce the same chunks.
    """

    def __init__(
        self,
        min_chunk_chars: int = 50,
        tokenizer: Optional[TokenizerInterface] = None,
        max_tokens: Optional[int] = None,
        smart_splitter: Optional[SmartChunkSplitter] = None,
    ):
        """
        Initialize the ChunkAssembler.

        Args:
            min_chunk_chars: Chunks shorter than this (context included) are dropped
            tokenizer: Tokenizer for the token budget (no budget when None)
            max_tokens: Token budget per chunk (no budget when None)
            smart_splitter: Splitter for oversized chunks (built from tokenizer if None)
        """
        self._min_chunk_chars = min_chunk_chars
        self._tokenizer = tokenizer
        self._max_tokens = max_tokens
        self._smart_splitter = smart_splitter
        if self._smart_splitter is None and tokenizer is not None:
            self._smart_splitter = SmartChunkSplitter(tokenizer)

    @property
    def min_chunk_chars(self) -> int:
        return self._min_chunk_chars

    def assemble(
        self,
        candidate: ChunkCandidate,
        lines: list[str],
        context: str,
        language: str,
        file_path: Optional[str] = None,
    ) -> list[Chunk]:
        """
        Build the chunk(s) for one candidate.

        Args:
            candidate: Node range reported by the traverser
            lines: Source split into lines
            context: Context prefix ('' when context is disabled or empty)
            language: Language id recorded on the chunk
            file_path: Optional source path recorded on the chunk

        Returns:
            Zero chunks if the candidate is below the minimum size, one chunk
            normally, several when the token budget forced a split
        """
        body_lines = lines[candidate.start_row : candidate.end_row + 1]
        body = "\n".join(body_lines)
        content = self._with_context(context, body)

        if len(content) < self._min_chunk_chars:
            return []

        description = describe(body)
        token_count = self._count(content)

        if token_count is None or token_count <= self._max_tokens:
            return [
                Chunk(
                    content=content,
                    start_line=candidate.start_row + 1,
                    end_line=candidate.end_row + 1,
                    language=language,
                    file_path=file_path,
                    node_type=candidate.node_type,
                    has_context=bool(context),
                    description=description,
                )
            ]

        return self._split_oversized(
            candidate, body_lines, context, language, file_path, description
        )

    def _with_context(self, context: str, body: str) -> str:
        return f"{context}{CONTEXT_SEPARATOR}{body}" if context else body

    def _count(self, content: str) -> Optional[int]:
        """Token count of content, or None when it cannot exceed the budget."""
        if self._tokenizer is None or self._max_tokens is None:
            return None
        # A token never covers less than one byte
        if len(content.encode("utf-8")) <= self._max_tokens:
            return None
        return self._tokenizer.count_tokens(content)

    def _split_oversized(
        self,
        candidate: ChunkCandidate,
        body_lines: list[str],
        context: str,
        language: str,
        file_path: Optional[str],
        description: str,
    ) -> list[Chunk]:
        """Split a chunk over the token budget into line-range parts."""
        prefix_tokens = self._tokenizer.count_tokens(context + CONTEXT_SEPARATOR) if context else 0
        budget = self._max_tokens - prefix_tokens
        if budget < self._max_tokens // 2:
            # Prefix larger than half the budget is dropped
            logger.debug(
                f"Context prefix too large for oversized {candidate.node_type} "
                f"at line {candidate.start_row + 1}, splitting without it"
            )
            context = ""
            budget = self._max_tokens

        ranges = self._smart_splitter.split_lines(body_lines, budget)
        parts = []
        for start, end in ranges:
            part_body = "\n".join(body_lines[start:end])
            content = self._with_context(context, part_body)
            if not part_body.strip() or len(content) < self._min_chunk_chars:
                continue
            parts.append(
                (candidate.start_row + start, candidate.start_row + end - 1, content)
            )

        chunks = []
        for index, (start_row, end_row, content) in enumerate(parts):
            chunks.append(
                Chunk(
                    content=content,
                    start_line=start_row + 1,
                    end_line=end_row + 1,
                    language=language,
                    file_path=file_path,
                    node_type=candidate.node_type,
                    has_context=bool(context),
                    description=description,
                    metadata={
                        "token_count": self._tokenizer.count_tokens(content),
                        "part_index": index,
                        "total_parts": len(parts),
                    },
                )
            )
        return chunks
