"""
Tests for the language-agnostic fallback splitter.
"""

import pytest

from codesplit.core.chunker import FALLBACK_NODE_TYPE, LineWindowSplitter


def numbered_lines(count: int, width: int = 20) -> str:
    return "\n".join(f"line {i:03d} ".ljust(width, "x") for i in range(count))


class TestLineWindowSplitter:
    """Tests for overlapping line windows."""

    def test_blank_input_yields_nothing(self):
        splitter = LineWindowSplitter()
        assert splitter.split("", "text") == []
        assert splitter.split("   \n\n\t", "text") == []

    def test_small_text_is_one_chunk(self):
        splitter = LineWindowSplitter(chunk_size=500, chunk_overlap=100)
        text = "first line\nsecond line\nthird line"

        chunks = splitter.split(text, "markdown", "README.md")

        assert len(chunks) == 1
        chunk = chunks[0]
        assert chunk.content == text
        assert chunk.start_line == 1
        assert chunk.end_line == 3
        assert chunk.language == "markdown"
        assert chunk.file_path == "README.md"
        assert chunk.node_type == FALLBACK_NODE_TYPE
        assert chunk.has_context is False
        assert chunk.description == "Code block"

    def test_windows_respect_chunk_size(self):
        text = numbered_lines(50)
        splitter = LineWindowSplitter(chunk_size=100, chunk_overlap=30)

        chunks = splitter.split(text, "text")

        assert len(chunks) > 1
        assert all(len(chunk.content) <= 100 for chunk in chunks)

    def test_content_matches_reported_lines(self):
        text = numbered_lines(40)
        lines = text.split("\n")
        splitter = LineWindowSplitter(chunk_size=120, chunk_overlap=40)

        for chunk in splitter.split(text, "text"):
            assert chunk.content == "\n".join(lines[chunk.start_line - 1 : chunk.end_line])

    def test_consecutive_windows_overlap(self):
        text = numbered_lines(40)
        splitter = LineWindowSplitter(chunk_size=100, chunk_overlap=50)

        chunks = splitter.split(text, "text")

        for previous, current in zip(chunks, chunks[1:]):
            assert current.start_line <= previous.end_line
            assert current.start_line > previous.start_line

    def test_zero_overlap_windows_are_disjoint(self):
        text = numbered_lines(40)
        splitter = LineWindowSplitter(chunk_size=100, chunk_overlap=0)

        chunks = splitter.split(text, "text")

        for previous, current in zip(chunks, chunks[1:]):
            assert current.start_line == previous.end_line + 1

    def test_every_line_is_covered(self):
        text = numbered_lines(60)
        splitter = LineWindowSplitter(chunk_size=90, chunk_overlap=25)

        covered = set()
        for chunk in splitter.split(text, "text"):
            covered.update(range(chunk.start_line, chunk.end_line + 1))

        assert covered == set(range(1, 61))

    def test_long_line_is_hard_cut(self):
        long_line = "a" * 250
        splitter = LineWindowSplitter(chunk_size=100, chunk_overlap=0)

        chunks = splitter.split(f"short\n{long_line}", "text")

        assert all(len(chunk.content) <= 100 for chunk in chunks)
        long_parts = [c for c in chunks if c.start_line == c.end_line == 2]
        assert long_parts
        assert all(set(c.content) == {"a"} for c in long_parts)
        assert "".join(c.content for c in long_parts) == long_line
        # The short first line borrows the head of the long one
        assert chunks[0].content == "short\n" + "a" * 44
        assert (chunks[0].start_line, chunks[0].end_line) == (1, 2)

    def test_whitespace_only_windows_skipped(self):
        text = "alpha\n" + "\n" * 200 + "omega"
        splitter = LineWindowSplitter(chunk_size=20, chunk_overlap=5)

        chunks = splitter.split(text, "text")

        assert all(chunk.content.strip() for chunk in chunks)
        assert chunks[0].content.startswith("alpha")
        assert chunks[-1].content.endswith("omega")

    def test_short_trailing_window_borrows_previous_line(self):
        text = "\n".join("y" * 165 for _ in range(3)) + "\ntiny"

        chunks = LineWindowSplitter().split(text, "text")

        assert [(c.start_line, c.end_line) for c in chunks] == [(1, 3), (3, 4)]
        assert chunks[1].content == "y" * 165 + "\ntiny"

    def test_short_window_takes_tail_of_long_line(self):
        splitter = LineWindowSplitter(chunk_size=100, chunk_overlap=0)

        chunks = splitter.split("x" * 98 + "\ntail", "text")

        assert [c.content for c in chunks] == ["x" * 98, "x" * 45 + "\ntail"]
        assert (chunks[1].start_line, chunks[1].end_line) == (1, 2)

    def test_short_input_stays_one_short_chunk(self):
        chunks = LineWindowSplitter().split("tiny", "text")
        assert [c.content for c in chunks] == ["tiny"]

    def test_minimum_can_be_disabled(self):
        text = "\n".join("y" * 165 for _ in range(3)) + "\ntiny"

        chunks = LineWindowSplitter(min_chunk_chars=0).split(text, "text")

        assert chunks[-1].content == "tiny"

    def test_is_deterministic(self):
        text = numbered_lines(30)
        splitter = LineWindowSplitter(chunk_size=80, chunk_overlap=20)
        assert splitter.split(text, "text") == splitter.split(text, "text")


class TestSizeValidation:
    """Tests for chunk size and overlap validation."""

    @pytest.mark.parametrize(
        "chunk_size,chunk_overlap",
        [(0, 0), (-5, 0), (100, -1), (100, 100), (100, 150)],
    )
    def test_invalid_sizes_rejected(self, chunk_size, chunk_overlap):
        with pytest.raises(ValueError):
            LineWindowSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)

    def test_negative_minimum_rejected(self):
        with pytest.raises(ValueError):
            LineWindowSplitter(min_chunk_chars=-1)

    def test_setters_validate(self):
        splitter = LineWindowSplitter(chunk_size=100, chunk_overlap=20)
        with pytest.raises(ValueError):
            splitter.set_chunk_overlap(100)
        with pytest.raises(ValueError):
            splitter.set_chunk_size(20)
        splitter.set_chunk_size(200)
        splitter.set_chunk_overlap(50)
        assert splitter.chunk_size == 200
        assert splitter.chunk_overlap == 50


class TestSplitText:
    """Tests for plain character windows."""

    def test_split_text_windows(self):
        splitter = LineWindowSplitter(chunk_size=4, chunk_overlap=0)
        assert splitter.split_text("abcdefghij") == ["abcd", "efgh", "ij"]

    def test_split_text_empty(self):
        assert LineWindowSplitter().split_text("") == []

    def test_split_text_preserves_content(self):
        text = "line one\nline two\n" * 50
        splitter = LineWindowSplitter(chunk_size=64, chunk_overlap=8)
        parts = splitter.split_text(text)
        assert "".join(parts) == text
        assert all(len(part) <= 64 for part in parts)
