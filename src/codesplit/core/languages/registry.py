"""
Language registry mapping language ids and file extensions to splitter configs.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from codesplit.core.errors import GrammarLoadError

from .models import LanguageConfig

logger = logging.getLogger(__name__)

# Default path to the languages configuration file
_DEFAULT_LANGUAGES_CONFIG = Path(__file__).parent / "languages.yaml"


class LanguageRegistry:
    """
    Static registry of the languages the AST splitter understands.

    Lookups are case-insensitive and accept any alias of a language. A missing
    entry is not an error: callers treat None as "use the fallback splitter".

    Example:
        >>> registry = LanguageRegistry()
        >>> registry.resolve("TS").name
        'typescript'
        >>> registry.resolve("cobol") is None
        True
    """

    def __init__(self, load_defaults: bool = True):
        """
        Initialize the language registry.

        Args:
            load_defaults: If True, load the bundled languages.yaml.
        """
        self._configs: dict[str, LanguageConfig] = {}
        self._ids: dict[str, str] = {}
        self._extension_to_language: dict[str, str] = {}

        if load_defaults:
            self._load_from_yaml(_DEFAULT_LANGUAGES_CONFIG)

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "LanguageRegistry":
        """
        Create a LanguageRegistry from a YAML configuration file.

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the config file format is invalid
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Languages config not found: {config_path}")

        registry = cls(load_defaults=False)
        registry._load_from_yaml(config_path)
        return registry

    def _load_from_yaml(self, config_path: Path) -> None:
        """
        Load language entries from a YAML file.

        Expected format:
            language_name:
              grammar: tree_sitter_module
              node_types: [kind, ...]
              ...
        """
        if not config_path.exists():
            logger.warning(f"Languages config not found: {config_path}, using empty registry")
            return

        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse languages config: {e}")
            raise ValueError(f"Invalid YAML in languages config: {e}") from e

        if data is None:
            return

        if not isinstance(data, dict):
            raise ValueError(f"Invalid languages config format: expected dict, got {type(data)}")

        for name, entry in data.items():
            self.register(_config_from_entry(str(name), entry))

    def register(self, config: LanguageConfig) -> "LanguageRegistry":
        """
        Register a language (and its aliases and extensions).

        Re-registering a canonical name replaces the previous entry.

        Raises:
            ValueError: If an alias is already claimed by another language

        Returns:
            Self for method chaining
        """
        name = config.name.lower()
        if name in self._configs:
            self.unregister(name)

        keys = [name] + [alias.lower() for alias in config.aliases]
        for key in keys:
            owner = self._ids.get(key)
            if owner is not None and owner != name:
                raise ValueError(f"Language id '{key}' is already registered for '{owner}'")

        self._configs[name] = config
        for key in keys:
            self._ids[key] = name
        for ext in config.extensions:
            self._extension_to_language[ext.lower()] = name
        return self

    def unregister(self, language: str) -> "LanguageRegistry":
        """Remove a language with all of its aliases and extensions."""
        name = self._ids.get(language.strip().lower())
        if name is None:
            return self

        del self._configs[name]
        self._ids = {key: owner for key, owner in self._ids.items() if owner != name}
        self._extension_to_language = {
            ext: owner for ext, owner in self._extension_to_language.items() if owner != name
        }
        return self

    def resolve(self, language_id: str) -> Optional[LanguageConfig]:
        """
        Resolve a language id or alias to its configuration.

        Args:
            language_id: Any registered id, case-insensitive (e.g. 'py', 'Python')

        Returns:
            LanguageConfig, or None when the language has no AST support
        """
        if not language_id:
            return None
        name = self._ids.get(language_id.strip().lower())
        if name is None:
            return None
        return self._configs[name]

    def is_supported(self, language_id: str) -> bool:
        return self.resolve(language_id) is not None

    def supported_languages(self) -> list[str]:
        """All accepted language ids, aliases included, sorted."""
        return sorted(self._ids)

    def languages(self) -> list[LanguageConfig]:
        """Canonical language entries, sorted by name."""
        return [self._configs[name] for name in sorted(self._configs)]

    def detect(self, extension: str) -> str:
        """
        Detect language from a file extension.

        Returns:
            Canonical language id or 'unknown' if not recognized
        """
        return self._extension_to_language.get(extension.lower(), "unknown")

    def detect_from_path(self, file_path: Path | str) -> str:
        """Detect language from a file path."""
        return self.detect(Path(file_path).suffix)

    def unknown_node_kinds(self, config: LanguageConfig) -> list[str]:
        """
        Node kinds in a language table that its grammar cannot produce.

        Raises:
            GrammarLoadError: If the grammar cannot be loaded
        """
        grammar = config.grammar
        return [kind for kind in config.node_types if grammar.id_for_node_kind(kind, True) is None]

    def check_grammar_setup(self) -> dict[str, bool]:
        """
        Load every registered grammar and validate its node table.

        A language passes when its grammar loads and every node kind in its
        table is a named kind of that grammar.

        Returns:
            Mapping of canonical language id to success
        """
        results = {}
        for config in self.languages():
            try:
                unknown = self.unknown_node_kinds(config)
            except GrammarLoadError as e:
                logger.error(f"Grammar for '{config.name}' is unavailable: {e}")
                results[config.name] = False
                continue

            if unknown:
                logger.error(f"Grammar for '{config.name}' has no node kinds {unknown}")
            results[config.name] = not unknown
        return results


def _config_from_entry(name: str, entry: Any) -> LanguageConfig:
    """Build a LanguageConfig from one languages.yaml entry."""
    if not isinstance(entry, dict):
        raise ValueError(f"Invalid entry for {name}: expected dict, got {type(entry)}")

    grammar = entry.get("grammar")
    if not grammar:
        raise ValueError(f"Language '{name}' has no grammar module")

    node_types = entry.get("node_types") or []
    if not isinstance(node_types, list) or not node_types:
        raise ValueError(f"Language '{name}' needs a non-empty node_types list")

    container_types = entry.get("container_types") or []
    unknown = set(container_types) - set(node_types)
    if unknown:
        # Containers only matter when the traverser stops on them
        logger.warning(
            f"Container types {sorted(unknown)} for '{name}' are not splittable and are ignored"
        )

    return LanguageConfig(
        name=name.lower(),
        grammar_module=str(grammar),
        grammar_function=str(entry.get("grammar_function", "language")),
        node_types=tuple(str(t) for t in node_types),
        container_types=frozenset(str(t) for t in container_types if t in node_types),
        aliases=tuple(str(a).lower() for a in entry.get("aliases") or []),
        extensions=tuple(str(e).lower() for e in entry.get("extensions") or []),
        comment_prefix=str(entry.get("comment_prefix", "//")),
        global_context=bool(entry.get("global_context", False)),
    )


# Global default registry instance
_default_registry = LanguageRegistry()


def get_language_registry() -> LanguageRegistry:
    """Get the global default language registry."""
    return _default_registry
