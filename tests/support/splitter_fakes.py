"""Test doubles for parser, tree, tokenizer and syntax node objects."""

import threading
from dataclasses import dataclass, field

from codesplit.core.tokenizer import TokenizerInterface


class WordTokenizer(TokenizerInterface):
    """Counts whitespace-separated words; deterministic and offline."""

    def count_tokens(self, text: str) -> int:
        return len(text.split())


@dataclass
class FakeNode:
    """Minimal stand-in for a tree-sitter node."""

    type: str
    start_row: int
    end_row: int
    children: list = field(default_factory=list)

    @property
    def start_point(self):
        return (self.start_row, 0)

    @property
    def end_point(self):
        return (self.end_row, 0)


class FakeTree:
    def __init__(self, root_node=None):
        self.root_node = root_node
        self.deleted = 0

    def delete(self):
        self.deleted += 1


class FakeParser:
    """Parser double returning a fixed tree, or raising on parse."""

    def __init__(self, tree=None, error: Exception | None = None):
        self.language = None
        self.tree = tree
        self.error = error
        self.resets = 0
        self.parsed: list[bytes] = []

    def parse(self, source: bytes):
        self.parsed.append(source)
        if self.error is not None:
            raise self.error
        return self.tree

    def reset(self):
        self.resets += 1


class ConcurrencyProbe:
    """Records the peak number of simultaneous holders of a resource."""

    def __init__(self):
        self._lock = threading.Lock()
        self.current = 0
        self.peak = 0

    def enter(self):
        with self._lock:
            self.current += 1
            self.peak = max(self.peak, self.current)

    def exit(self):
        with self._lock:
            self.current -= 1
