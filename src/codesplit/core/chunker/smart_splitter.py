"""
Smart splitter for chunks that exceed the embedding token limit.

Cuts an oversized node into line ranges without breaking statements in the
middle where it can avoid it.
"""

import logging
import re

from codesplit.core.tokenizer import TokenizerInterface

logger = logging.getLogger(__name__)


class SmartChunkSplitter:
    """
    Splits a run of source lines into token-bounded line ranges.

    Split strategy (by priority):
    1. After an empty line
    2. Before a statement boundary (definition, control flow, return, ...)
    3. Before a line indented no deeper than the first line of the range
    4. Last resort: the furthest line that still fits (logged)
    """

    # Patterns that indicate statement boundaries, across the supported languages
    STATEMENT_BOUNDARY_PATTERNS = [
        re.compile(r"^\s*(async\s+)?def\s+"),  # Python function
        re.compile(r"^\s*class\s+"),  # Class definition
        re.compile(r"^\s*(export\s+)?(async\s+)?function\b"),  # JS/TS function
        re.compile(r"^\s*(pub\s+)?fn\s+"),  # Rust function
        re.compile(r"^\s*func\s+"),  # Go function
        re.compile(r"^\s*(if|elif|else if)\b"),  # Conditionals
        re.compile(r"^\s*else\b"),  # Else branch
        re.compile(r"^\s*(for|while|do|switch|match)\b"),  # Loops and dispatch
        re.compile(r"^\s*(try|except|catch|finally)\b"),  # Exception handling
        re.compile(r"^\s*with\s+"),  # With statement
        re.compile(r"^\s*return\b"),  # Return statement
        re.compile(r"^\s*(yield|raise|throw)\b"),  # Yield / raise / throw
        re.compile(r"^\s*@"),  # Decorator / annotation
        re.compile(r"^\s*(public|private|protected|internal|static)\s"),  # Member declaration
    ]

    def __init__(self, tokenizer: TokenizerInterface):
        """
        Initialize the SmartChunkSplitter.

        Args:
            tokenizer: Tokenizer for token counting
        """
        self._tokenizer = tokenizer

    def split_lines(self, lines: list[str], max_tokens: int) -> list[tuple[int, int]]:
        """
        Split lines into ranges whose joined text fits within max_tokens.

        Args:
            lines: Lines of the oversized node
            max_tokens: Token budget for each range

        Returns:
            List of (start, end) index pairs, end exclusive, covering all lines
        """
        if not lines:
            return []

        split_points = self._find_split_points(lines, max(max_tokens, 1))
        bounds = split_points + [len(lines)]
        return [
            (bounds[i], bounds[i + 1]) for i in range(len(split_points)) if bounds[i] < bounds[i + 1]
        ]

    def _find_split_points(self, lines: list[str], max_tokens: int) -> list[int]:
        """Find the line indices where each range starts."""
        split_points = [0]
        current_start = 0

        while current_start < len(lines):
            end_idx = self._find_max_end_index(lines, current_start, max_tokens)

            if end_idx <= current_start:
                # Single line exceeds limit - force split after this line
                logger.warning(f"Line {current_start + 1} exceeds token limit, forcing split")
                end_idx = current_start + 1

            if end_idx >= len(lines):
                break

            best_split = self._find_best_split_point(lines, current_start, end_idx)
            current_start = best_split if best_split > current_start else end_idx
            split_points.append(current_start)

        return split_points

    def _find_max_end_index(self, lines: list[str], start_idx: int, max_tokens: int) -> int:
        """
        Find the maximum end index that fits within token limit.

        Uses binary search for efficiency.
        """
        left = start_idx
        right = len(lines)

        while left < right:
            mid = (left + right + 1) // 2
            tokens = self._tokenizer.count_tokens("\n".join(lines[start_idx:mid]))

            if tokens <= max_tokens:
                left = mid
            else:
                right = mid - 1

        return left

    def _find_best_split_point(self, lines: list[str], start_idx: int, end_idx: int) -> int:
        """
        Pick the best place to cut within (start_idx, end_idx].

        Candidates are searched backwards from end_idx so the first range
        stays as large as possible.
        """
        empty_line_candidates = []
        statement_boundary_candidates = []
        low_indent_candidates = []

        base_indent = self._get_indentation(lines[start_idx])

        for i in range(end_idx - 1, start_idx, -1):
            line = lines[i]

            if not line.strip():
                empty_line_candidates.append(i + 1)
                continue

            if self._is_statement_boundary(line):
                statement_boundary_candidates.append(i)

            if self._get_indentation(line) <= base_indent:
                low_indent_candidates.append(i)

        for candidates in (
            empty_line_candidates,
            statement_boundary_candidates,
            low_indent_candidates,
        ):
            # i + 1 for an empty line at end_idx - 1 would equal end_idx, still valid
            valid = [c for c in candidates if start_idx < c <= end_idx]
            if valid:
                return valid[0]

        return end_idx

    def _is_statement_boundary(self, line: str) -> bool:
        """Check if a line represents a statement boundary."""
        return any(pattern.match(line) for pattern in self.STATEMENT_BOUNDARY_PATTERNS)

    def _get_indentation(self, line: str) -> int:
        """Get the indentation level of a line."""
        return len(line) - len(line.lstrip())
