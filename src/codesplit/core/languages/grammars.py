"""
Tree-sitter grammar loading.

Grammar packages (tree_sitter_python, tree_sitter_typescript, ...) expose a
function returning a raw language pointer. Loaded languages are cached per
(module, function) pair for the life of the process.
"""

import functools
import importlib
import logging
from typing import Any

from codesplit.core.errors import GrammarLoadError

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def load_grammar(module_name: str, function_name: str = "language") -> Any:
    """
    Load a tree-sitter Language from a grammar package.

    Args:
        module_name: Grammar package to import (e.g. 'tree_sitter_python')
        function_name: Function returning the language pointer

    Returns:
        tree_sitter.Language instance

    Raises:
        GrammarLoadError: If the package is missing or the language cannot be built
    """
    try:
        import tree_sitter

        module = importlib.import_module(module_name)
    except ImportError as e:
        raise GrammarLoadError(f"Grammar package '{module_name}' is not installed: {e}") from e

    loader = getattr(module, function_name, None)
    if loader is None:
        raise GrammarLoadError(f"Grammar package '{module_name}' has no {function_name}()")

    try:
        lang_obj = loader()
        if isinstance(lang_obj, tree_sitter.Language):
            language = lang_obj
        else:
            language = tree_sitter.Language(lang_obj)
    except Exception as e:
        raise GrammarLoadError(
            f"Failed to load grammar {module_name}.{function_name}(): {e}"
        ) from e

    logger.debug(f"Loaded tree-sitter grammar {module_name}.{function_name}()")
    return language
