"""
Token counting for chunk size limits.

Embedding models cap their input in tokens rather than characters, so the
assembler measures chunks with tiktoken before handing them downstream.
"""

from abc import ABC, abstractmethod
from typing import Optional

import tiktoken


class TokenizerInterface(ABC):
    """Abstract interface for token counting."""

    @abstractmethod
    def count_tokens(self, text: str) -> int:
        """Return the number of tokens in text."""
        pass


class TiktokenTokenizer(TokenizerInterface):
    """
    Tokenizer backed by a tiktoken encoding.

    The default 'cl100k_base' encoding matches the text-embedding-3-* models.
    """

    def __init__(self, encoding_name: str = "cl100k_base"):
        self._encoding_name = encoding_name
        self._encoding: Optional[tiktoken.Encoding] = None

    @property
    def encoding_name(self) -> str:
        return self._encoding_name

    @property
    def encoding(self) -> tiktoken.Encoding:
        """Lazy-load the encoding to avoid initialization overhead."""
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self._encoding_name)
        return self._encoding

    def count_tokens(self, text: str) -> int:
        if not text:
            return 0
        # Source files may legitimately contain special-token strings
        return len(self.encoding.encode(text, disallowed_special=()))


def get_default_tokenizer() -> TokenizerInterface:
    """Get a TiktokenTokenizer with cl100k_base encoding."""
    return TiktokenTokenizer(encoding_name="cl100k_base")
