"""
Configuration module for codesplit.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    return section_defaults.get(key, fallback)


@dataclass
class SplitterConfig:
    """Chunking parameters for AstSplitter and its fallback."""

    chunk_size: int = field(default_factory=lambda: _get_default("splitter", "chunk_size", 500))
    chunk_overlap: int = field(
        default_factory=lambda: _get_default("splitter", "chunk_overlap", 100)
    )
    include_context: bool = field(
        default_factory=lambda: _get_default("splitter", "include_context", True)
    )
    context_lines: int = field(
        default_factory=lambda: _get_default("splitter", "context_lines", 3)
    )
    min_chunk_chars: int = field(
        default_factory=lambda: _get_default("splitter", "min_chunk_chars", 50)
    )
    # None disables token-based splitting of oversized chunks
    max_tokens: Optional[int] = field(
        default_factory=lambda: _get_default("splitter", "max_tokens", 8192)
    )

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.chunk_overlap < 0:
            raise ValueError(f"chunk_overlap must not be negative, got {self.chunk_overlap}")
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        if self.context_lines < 0:
            raise ValueError(f"context_lines must not be negative, got {self.context_lines}")


@dataclass
class PoolConfig:
    """Configuration for the tree-sitter parser pool."""

    initial_size: int = field(default_factory=lambda: _get_default("pool", "initial_size", 3))
    max_size: int = field(default_factory=lambda: _get_default("pool", "max_size", 10))
    acquire_timeout: Optional[float] = field(
        default_factory=lambda: _get_default("pool", "acquire_timeout", None)
    )

    def __post_init__(self) -> None:
        if self.max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {self.max_size}")
        if self.initial_size < 0:
            raise ValueError(f"initial_size must not be negative, got {self.initial_size}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "INFO"))
    format: str = field(
        default_factory=lambda: _get_default("logging", "format", "%(name)s - %(message)s")
    )


@dataclass
class CodesplitConfig:
    """Main configuration class for codesplit."""

    splitter: SplitterConfig = field(default_factory=SplitterConfig)
    pool: PoolConfig = field(default_factory=PoolConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "CodesplitConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            CodesplitConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "CodesplitConfig":
        """Create CodesplitConfig from a dictionary."""
        config = cls()

        if "splitter" in data:
            config.splitter = SplitterConfig(**data["splitter"])
        if "pool" in data:
            config.pool = PoolConfig(**data["pool"])
        if "logging" in data:
            config.logging = LoggingConfig(**data["logging"])

        return config

    def apply_env_overrides(self) -> "CodesplitConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: CODESPLIT_<SECTION>_<KEY>
        Examples:
            - CODESPLIT_SPLITTER_CHUNK_SIZE
            - CODESPLIT_SPLITTER_INCLUDE_CONTEXT
            - CODESPLIT_POOL_MAX_SIZE
            - CODESPLIT_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Splitter config
            "CODESPLIT_SPLITTER_CHUNK_SIZE": ("splitter", "chunk_size", int),
            "CODESPLIT_SPLITTER_CHUNK_OVERLAP": ("splitter", "chunk_overlap", int),
            "CODESPLIT_SPLITTER_INCLUDE_CONTEXT": ("splitter", "include_context", _parse_bool),
            "CODESPLIT_SPLITTER_CONTEXT_LINES": ("splitter", "context_lines", int),
            "CODESPLIT_SPLITTER_MIN_CHUNK_CHARS": ("splitter", "min_chunk_chars", int),
            "CODESPLIT_SPLITTER_MAX_TOKENS": ("splitter", "max_tokens", _parse_optional_int),
            # Pool config
            "CODESPLIT_POOL_INITIAL_SIZE": ("pool", "initial_size", int),
            "CODESPLIT_POOL_MAX_SIZE": ("pool", "max_size", int),
            "CODESPLIT_POOL_ACQUIRE_TIMEOUT": ("pool", "acquire_timeout", _parse_optional_float),
            # Logging config
            "CODESPLIT_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        # Re-run section validation on the overridden values
        self.splitter.__post_init__()
        self.pool.__post_init__()
        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def _parse_optional_int(value: str) -> Optional[int]:
    if value.strip().lower() in ("", "none", "null", "off"):
        return None
    return int(value)


def _parse_optional_float(value: str) -> Optional[float]:
    if value.strip().lower() in ("", "none", "null", "off"):
        return None
    return float(value)


def load_config(
    config_path: Optional[Path | str] = None, apply_env: bool = True
) -> CodesplitConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        CodesplitConfig instance
    """
    if config_path:
        config = CodesplitConfig.from_file(config_path)
    else:
        config = CodesplitConfig()

    if apply_env:
        config.apply_env_overrides()

    return config
