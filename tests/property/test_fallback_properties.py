"""Property-based tests for the fallback splitter."""

from hypothesis import given, settings

from codesplit.core.chunker import LineWindowSplitter
from tests.support.splitter_strategies import multi_line_text_strategy, window_sizes_strategy


@given(text=multi_line_text_strategy(), sizes=window_sizes_strategy())
@settings(max_examples=100)
def test_fallback_never_fails_and_respects_size(text, sizes):
    """
    For any text, the fallback returns chunks no longer than chunk_size, and
    at least one chunk whenever the text is not blank.
    """
    chunk_size, chunk_overlap = sizes
    splitter = LineWindowSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)

    chunks = splitter.split(text, "text")

    if text.strip():
        assert chunks
    else:
        assert chunks == []
    for chunk in chunks:
        assert len(chunk.content) <= chunk_size
        assert chunk.content.strip()
        assert chunk.node_type == "fallback"


@given(text=multi_line_text_strategy(), sizes=window_sizes_strategy())
@settings(max_examples=100)
def test_fallback_line_numbers_in_order(text, sizes):
    """Chunk line ranges are valid and their starts never decrease."""
    chunk_size, chunk_overlap = sizes
    line_count = len(text.split("\n"))

    chunks = LineWindowSplitter(chunk_size, chunk_overlap).split(text, "text")

    for chunk in chunks:
        assert 1 <= chunk.start_line <= chunk.end_line <= line_count
    starts = [chunk.start_line for chunk in chunks]
    assert starts == sorted(starts)


@given(text=multi_line_text_strategy(), sizes=window_sizes_strategy())
@settings(max_examples=100)
def test_fallback_content_comes_from_reported_lines(text, sizes):
    """Every chunk's content is drawn from the lines it reports."""
    chunk_size, chunk_overlap = sizes
    lines = text.split("\n")

    for chunk in LineWindowSplitter(chunk_size, chunk_overlap).split(text, "text"):
        source = "\n".join(lines[chunk.start_line - 1 : chunk.end_line])
        assert chunk.content in source


@given(text=multi_line_text_strategy(), sizes=window_sizes_strategy())
@settings(max_examples=100)
def test_fallback_covers_every_non_blank_line(text, sizes):
    """No non-blank line is lost between windows."""
    chunk_size, chunk_overlap = sizes
    lines = text.split("\n")

    covered = set()
    for chunk in LineWindowSplitter(chunk_size, chunk_overlap).split(text, "text"):
        covered.update(range(chunk.start_line, chunk.end_line + 1))

    for row, line in enumerate(lines, start=1):
        if line.strip():
            assert row in covered


@given(text=multi_line_text_strategy(), sizes=window_sizes_strategy())
@settings(max_examples=100)
def test_fallback_chunks_meet_minimum_size(text, sizes):
    """
    Unless the whole input is shorter than the minimum, no chunk is shorter
    than min_chunk_chars (capped at chunk_size).
    """
    chunk_size, chunk_overlap = sizes
    minimum = min(50, chunk_size)

    chunks = LineWindowSplitter(chunk_size, chunk_overlap, min_chunk_chars=50).split(text, "text")

    if len(text) >= minimum:
        for chunk in chunks:
            assert len(chunk.content) >= minimum
            assert len(chunk.content) <= chunk_size
