"""
Core Layer - Language registry, parser resources, tokenization and chunking.
"""

from codesplit.core.config import (
    CodesplitConfig,
    LoggingConfig,
    PoolConfig,
    SplitterConfig,
    load_config,
)
from codesplit.core.errors import (
    CodesplitError,
    GrammarLoadError,
    ParserPoolError,
    PoolClosedError,
    PoolExhaustedError,
    SplitterDisposedError,
    TreeDisposedError,
)
from codesplit.core.languages import (
    LanguageConfig,
    LanguageRegistry,
    get_language_registry,
    load_grammar,
)
from codesplit.core.parsing import OwnedTree, ParserPool, TreeLifecycleManager
from codesplit.core.tokenizer import (
    TiktokenTokenizer,
    TokenizerInterface,
    get_default_tokenizer,
)
from codesplit.core.chunker import (
    AstSplitter,
    Chunk,
    SplitterInterface,
    create_splitter,
)

__all__ = [
    # Config
    "CodesplitConfig",
    "SplitterConfig",
    "PoolConfig",
    "LoggingConfig",
    "load_config",
    # Errors
    "CodesplitError",
    "GrammarLoadError",
    "ParserPoolError",
    "PoolExhaustedError",
    "PoolClosedError",
    "TreeDisposedError",
    "SplitterDisposedError",
    # Languages
    "LanguageConfig",
    "LanguageRegistry",
    "get_language_registry",
    "load_grammar",
    # Parsing
    "ParserPool",
    "OwnedTree",
    "TreeLifecycleManager",
    # Tokenizer
    "TokenizerInterface",
    "TiktokenTokenizer",
    "get_default_tokenizer",
    # Chunker
    "AstSplitter",
    "Chunk",
    "SplitterInterface",
    "create_splitter",
]
