"""
AST splitter: the chunking engine entry point.

Splits source text along syntax boundaries for languages with a registered
tree-sitter grammar, and falls back to line windows for everything else.
"""

import dataclasses
import logging
import threading
from typing import Optional

from codesplit.core.config import CodesplitConfig, PoolConfig, SplitterConfig
from codesplit.core.errors import GrammarLoadError, SplitterDisposedError
from codesplit.core.languages import LanguageConfig, LanguageRegistry, get_language_registry
from codesplit.core.parsing import ParserPool, TreeLifecycleManager
from codesplit.core.tokenizer import TokenizerInterface, get_default_tokenizer

from .assembler import ChunkAssembler
from .context_builder import ContextBuilder
from .context_patterns import ContextPatternRegistry
from .fallback import LineWindowSplitter
from .interfaces import SplitterInterface
from .models import Chunk
from .traverser import SyntaxTraverser

logger = logging.getLogger(__name__)


class AstSplitter(SplitterInterface):
    """
    Concrete implementation of SplitterInterface.

    Provides:
    - AST-based chunking for every language in the registry
    - Context prefixes (global, ancestor and surrounding lines)
    - Token-budget enforcement for oversized nodes
    - Line-window fallback for unsupported languages and failed parses

    Safe to share across threads: up to ``pool.max_size`` calls parse at the
    same time, further callers wait for a parser to be released.
    """

    def __init__(
        self,
        config: Optional[SplitterConfig] = None,
        registry: Optional[LanguageRegistry] = None,
        pool: Optional[ParserPool] = None,
        tokenizer: Optional[TokenizerInterface] = None,
        pool_config: Optional[PoolConfig] = None,
        tree_manager: Optional[TreeLifecycleManager] = None,
        pattern_registry: Optional[ContextPatternRegistry] = None,
    ):
        """
        Initialize the AstSplitter.

        Args:
            config: Chunking parameters (defaults from defaults.yaml if None)
            registry: Language registry (uses the global default if None)
            pool: Parser pool (built from pool_config if None)
            tokenizer: Tokenizer for the token budget (tiktoken if None and
                config.max_tokens is set)
            pool_config: Pool sizing, used only when pool is None
            tree_manager: Tree lifecycle manager (a private one if None)
            pattern_registry: Global-context patterns (uses default if None)
        """
        self._config = dataclasses.replace(config) if config else SplitterConfig()
        self._registry = registry or get_language_registry()

        if pool is None:
            pool_config = pool_config or PoolConfig()
            pool = ParserPool(
                initial_size=pool_config.initial_size,
                max_size=pool_config.max_size,
                acquire_timeout=pool_config.acquire_timeout,
            )
        self._pool = pool
        self._trees = tree_manager or TreeLifecycleManager()
        self._patterns = pattern_registry

        if tokenizer is None and self._config.max_tokens is not None:
            tokenizer = get_default_tokenizer()
        self._assembler = ChunkAssembler(
            min_chunk_chars=self._config.min_chunk_chars,
            tokenizer=tokenizer,
            max_tokens=self._config.max_tokens,
        )
        self._fallback = LineWindowSplitter(
            chunk_size=self._config.chunk_size,
            chunk_overlap=self._config.chunk_overlap,
            min_chunk_chars=self._config.min_chunk_chars,
        )

        self._lock = threading.Lock()
        self._disposed = False

    @property
    def config(self) -> SplitterConfig:
        """A copy of the current chunking parameters."""
        with self._lock:
            return dataclasses.replace(self._config)

    @property
    def pool(self) -> ParserPool:
        return self._pool

    @property
    def registry(self) -> LanguageRegistry:
        return self._registry

    def set_chunk_size(self, chunk_size: int) -> None:
        with self._lock:
            self._fallback.set_chunk_size(chunk_size)
            self._config.chunk_size = chunk_size

    def set_chunk_overlap(self, chunk_overlap: int) -> None:
        with self._lock:
            self._fallback.set_chunk_overlap(chunk_overlap)
            self._config.chunk_overlap = chunk_overlap

    def set_include_context(self, include_context: bool) -> None:
        with self._lock:
            self._config.include_context = include_context

    def set_context_lines(self, context_lines: int) -> None:
        if context_lines < 0:
            raise ValueError(f"context_lines must not be negative, got {context_lines}")
        with self._lock:
            self._config.context_lines = context_lines

    def supported_languages(self) -> list[str]:
        """Language ids (aliases included) that get AST splitting."""
        return self._registry.supported_languages()

    def is_language_supported(self, language_id: str) -> bool:
        return self._registry.is_supported(language_id)

    def split_text(self, text: str) -> list[str]:
        """Split arbitrary text into chunk_size character windows."""
        return self._fallback.split_text(text)

    def split(
        self, source_text: str, language_id: str, file_path: Optional[str] = None
    ) -> list[Chunk]:
        """
        Split source text into chunks.

        Routing:
        - language not registered: fallback splitter
        - grammar missing, no root node, or any traversal error: logged, fallback
        - parser pool timeout: PoolExhaustedError propagates

        Raises:
            SplitterDisposedError: If dispose() has been called
            PoolExhaustedError: If a configured acquire timeout elapses
        """
        if self._disposed:
            raise SplitterDisposedError("AstSplitter has been disposed")

        source_text = source_text or ""
        target = file_path or "unknown"

        language = self._registry.resolve(language_id)
        if language is None:
            logger.info(
                f"Language '{language_id}' not supported by AST, using fallback for: {target}"
            )
            return self._fallback.split(source_text, language_id, file_path)

        try:
            grammar = language.grammar
        except GrammarLoadError as e:
            logger.warning(f"Grammar unavailable for '{language_id}', falling back: {e}")
            return self._fallback.split(source_text, language_id, file_path)

        with self._lock:
            settings = dataclasses.replace(self._config)

        chunks: Optional[list[Chunk]] = None
        with self._pool.lease() as parser:
            try:
                logger.debug(f"Using AST splitter for {language.name} file: {target}")
                parser.language = grammar
                with self._trees.parse(parser, source_text.encode("utf-8")) as owned:
                    root = owned.root_node
                    if root is None:
                        logger.warning(f"Failed to parse AST, falling back: {target}")
                    else:
                        chunks = self._extract_chunks(
                            root, source_text, language, language_id, file_path, settings
                        )
            except Exception as e:
                logger.warning(f"AST splitter failed for {language_id}, falling back: {e}")
                chunks = None

        if chunks is None:
            return self._fallback.split(source_text, language_id, file_path)
        return chunks

    def _extract_chunks(
        self,
        root,
        source_text: str,
        language: LanguageConfig,
        language_id: str,
        file_path: Optional[str],
        settings: SplitterConfig,
    ) -> list[Chunk]:
        """Traverse the tree and assemble chunks with their context."""
        lines = source_text.split("\n")
        builder = ContextBuilder(
            context_lines=settings.context_lines, pattern_registry=self._patterns
        )

        global_context = ""
        if settings.include_context and language.global_context:
            global_context = builder.extract_global_context(lines, language.name)

        traverser = SyntaxTraverser(language.node_types, language.container_types)
        candidates = traverser.walk(root, lambda row: builder.extract_signature(lines, row))

        chunks: list[Chunk] = []
        for candidate in candidates:
            context = ""
            if settings.include_context:
                context = builder.build(
                    language,
                    global_context,
                    candidate.ancestor_signature,
                    lines,
                    candidate.start_row,
                )
            chunks.extend(
                self._assembler.assemble(candidate, lines, context, language_id, file_path)
            )

        # Stable: only reorders parts of nodes split for the token budget
        chunks.sort(key=lambda chunk: chunk.start_line)
        return chunks

    def dispose(self) -> None:
        """
        Release the parser pool and any syntax tree still alive.

        Call once at end of life; later calls are no-ops.
        """
        with self._lock:
            if self._disposed:
                return
            self._disposed = True

        logger.debug("Disposing AST splitter resources")
        self._trees.dispose_all()
        self._pool.destroy()

    def __enter__(self) -> "AstSplitter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


def create_splitter(
    config: Optional[CodesplitConfig] = None,
    registry: Optional[LanguageRegistry] = None,
    tokenizer: Optional[TokenizerInterface] = None,
) -> AstSplitter:
    """
    Factory function to create an AstSplitter from application config.

    Args:
        config: Full configuration (loaded with load_config() if None)
        registry: Language registry (uses the global default if None)
        tokenizer: Tokenizer instance (tiktoken default if None)

    Returns:
        Configured AstSplitter instance
    """
    if config is None:
        from codesplit.core.config import load_config

        config = load_config()

    return AstSplitter(
        config=config.splitter,
        registry=registry,
        tokenizer=tokenizer,
        pool_config=config.pool,
    )
