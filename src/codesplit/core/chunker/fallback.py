"""
Language-agnostic fallback splitting.

Used when a language has no registered grammar, or when AST splitting fails
for any reason. Works on whole lines and never raises on arbitrary input.
"""

import logging
from typing import Optional

from .models import DEFAULT_DESCRIPTION, FALLBACK_NODE_TYPE, Chunk

logger = logging.getLogger(__name__)

Piece = tuple[int, str]


def _validate_sizes(chunk_size: int, chunk_overlap: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if chunk_overlap < 0:
        raise ValueError(f"chunk_overlap must not be negative, got {chunk_overlap}")
    if chunk_overlap >= chunk_size:
        raise ValueError(
            f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def _joined_length(pieces: list[Piece]) -> int:
    if not pieces:
        return 0
    return sum(len(text) for _, text in pieces) + len(pieces) - 1


def _render(window: list[Piece]) -> str:
    """Join pieces, with a newline only between pieces of different rows."""
    parts = []
    previous_row = None
    for row, text in window:
        if parts and row != previous_row:
            parts.append("\n")
        parts.append(text)
        previous_row = row
    return "".join(parts)


class LineWindowSplitter:
    """
    Splits text into windows of whole lines bounded by a character budget.

    Each window holds as many consecutive lines as fit in ``chunk_size``
    characters (newlines included). The next window starts with the trailing
    lines of the previous one that fit in ``chunk_overlap`` characters. A line
    longer than ``chunk_size`` is cut into ``chunk_size`` pieces, each
    reported on that line.

    A window shorter than ``min_chunk_chars`` borrows text from its neighbour
    (still within ``chunk_size``), so only an input that is itself shorter
    than the minimum yields a short chunk.
    """

    def __init__(
        self, chunk_size: int = 500, chunk_overlap: int = 100, min_chunk_chars: int = 50
    ):
        """
        Initialize the LineWindowSplitter.

        Args:
            chunk_size: Maximum characters per chunk (default: 500)
            chunk_overlap: Maximum characters carried into the next chunk (default: 100)
            min_chunk_chars: Minimum characters per chunk, capped at chunk_size (default: 50)

        Raises:
            ValueError: If the sizes are not positive or overlap >= size
        """
        _validate_sizes(chunk_size, chunk_overlap)
        if min_chunk_chars < 0:
            raise ValueError(f"min_chunk_chars must not be negative, got {min_chunk_chars}")
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._min_chunk_chars = min_chunk_chars

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    @property
    def min_chunk_chars(self) -> int:
        return self._min_chunk_chars

    def set_chunk_size(self, chunk_size: int) -> None:
        _validate_sizes(chunk_size, self._chunk_overlap)
        self._chunk_size = chunk_size

    def set_chunk_overlap(self, chunk_overlap: int) -> None:
        _validate_sizes(self._chunk_size, chunk_overlap)
        self._chunk_overlap = chunk_overlap

    def split(self, text: str, language: str, file_path: Optional[str] = None) -> list[Chunk]:
        """
        Split text into overlapping line windows.

        Args:
            text: Content to split
            language: Language id recorded on each chunk
            file_path: Optional source path recorded on each chunk

        Returns:
            Chunks in document order; empty only for blank input
        """
        if not text or not text.strip():
            return []

        pieces = self._pieces(text)
        minimum = min(self._min_chunk_chars, self._chunk_size)
        bounds = self._window_bounds(pieces)

        chunks = []
        for index, (start, end) in enumerate(bounds):
            window = pieces[start:end]
            content = _render(window)
            if not content.strip():
                continue

            if len(content) < minimum:
                if index > 0:
                    window = self._grow_backward(window, pieces[:start], minimum)
                elif end < len(pieces):
                    window = self._grow_forward(window, pieces[end], minimum)
                content = _render(window)

            chunks.append(
                Chunk(
                    content=content,
                    start_line=window[0][0] + 1,
                    end_line=window[-1][0] + 1,
                    language=language,
                    file_path=file_path,
                    node_type=FALLBACK_NODE_TYPE,
                    has_context=False,
                    description=DEFAULT_DESCRIPTION,
                )
            )

        logger.debug(
            f"Fallback splitter produced {len(chunks)} chunks for {file_path or 'unknown'}"
        )
        return chunks

    def split_text(self, text: str) -> list[str]:
        """
        Split text into plain character windows of chunk_size, without overlap.

        >>> LineWindowSplitter(chunk_size=4, chunk_overlap=0).split_text("abcdefghij")
        ['abcd', 'efgh', 'ij']
        """
        if not text:
            return []
        size = self._chunk_size
        return [text[i : i + size] for i in range(0, len(text), size)]

    def _pieces(self, text: str) -> list[Piece]:
        """Split text into (row, text) pieces no longer than chunk_size."""
        size = self._chunk_size
        pieces = []
        for row, line in enumerate(text.split("\n")):
            if len(line) <= size:
                pieces.append((row, line))
                continue
            for i in range(0, len(line), size):
                pieces.append((row, line[i : i + size]))
        return pieces

    def _window_bounds(self, pieces: list[Piece]) -> list[tuple[int, int]]:
        """Lay out windows as (start, end) slices of pieces, end exclusive."""
        bounds: list[tuple[int, int]] = []
        start = 0
        index = 0
        fresh = False

        while index < len(pieces):
            piece = pieces[index][1]
            grown = _joined_length(pieces[start:index]) + len(piece) + (1 if index > start else 0)

            if index > start and grown > self._chunk_size:
                if fresh:
                    bounds.append((start, index))
                start = self._overlap_start(pieces, start, index)
                # Keep dropping carried lines until the next piece fits
                while start < index and (
                    _joined_length(pieces[start:index]) + len(piece) + 1 > self._chunk_size
                ):
                    start += 1
                fresh = False
                continue

            index += 1
            fresh = True

        if index > start and fresh:
            bounds.append((start, index))
        return bounds

    def _overlap_start(self, pieces: list[Piece], start: int, end: int) -> int:
        """Start of the trailing run that fits in chunk_overlap, never the whole window."""
        if self._chunk_overlap <= 0:
            return end

        tail_start = end
        for i in range(end - 1, start, -1):
            if _joined_length(pieces[i:end]) > self._chunk_overlap:
                break
            tail_start = i
        return tail_start

    def _grow_backward(
        self, window: list[Piece], before: list[Piece], minimum: int
    ) -> list[Piece]:
        """Prepend preceding text until the window reaches the minimum."""
        length = len(_render(window))
        index = len(before)

        while length < minimum and index > 0:
            index -= 1
            row, text = before[index]
            separator = 0 if row == window[0][0] else 1
            if length + separator + len(text) <= self._chunk_size:
                window = [(row, text)] + window
                length += separator + len(text)
                continue
            # Only the tail of this piece fits
            need = max(minimum - length - separator, 0)
            window = [(row, text[len(text) - need :])] + window
            break

        return window

    def _grow_forward(self, window: list[Piece], following: Piece, minimum: int) -> list[Piece]:
        """Append the head of the next piece until the window reaches the minimum."""
        length = len(_render(window))
        row, text = following
        separator = 0 if row == window[-1][0] else 1
        need = max(minimum - length - separator, 0)
        return window + [(row, text[:need])]
