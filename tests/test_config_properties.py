"""
Property-based tests for CodesplitConfig round-trip serialization, plus
unit tests for defaults, validation and environment overrides.
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from codesplit.core.config import (
    CodesplitConfig,
    LoggingConfig,
    PoolConfig,
    SplitterConfig,
    load_config,
)

# Strategies for generating valid configuration values
safe_text = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "S"),
        blacklist_characters="\x00\n\r\t",
    ),
    min_size=1,
    max_size=50,
).filter(lambda s: s.strip() != "")

log_level = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


@st.composite
def splitter_config_strategy(draw):
    """Generate valid SplitterConfig instances."""
    chunk_size = draw(st.integers(min_value=1, max_value=10000))
    return SplitterConfig(
        chunk_size=chunk_size,
        chunk_overlap=draw(st.integers(min_value=0, max_value=chunk_size - 1)),
        include_context=draw(st.booleans()),
        context_lines=draw(st.integers(min_value=0, max_value=20)),
        min_chunk_chars=draw(st.integers(min_value=0, max_value=500)),
        max_tokens=draw(st.one_of(st.none(), st.integers(min_value=1, max_value=32000))),
    )


@st.composite
def pool_config_strategy(draw):
    """Generate valid PoolConfig instances."""
    return PoolConfig(
        initial_size=draw(st.integers(min_value=0, max_value=16)),
        max_size=draw(st.integers(min_value=1, max_value=64)),
        acquire_timeout=draw(
            st.one_of(
                st.none(),
                st.floats(min_value=0.1, max_value=300.0, allow_nan=False, allow_infinity=False),
            )
        ),
    )


@st.composite
def logging_config_strategy(draw):
    """Generate valid LoggingConfig instances."""
    return LoggingConfig(
        level=draw(log_level),
        format=draw(safe_text),
    )


@st.composite
def codesplit_config_strategy(draw):
    """Generate valid CodesplitConfig instances."""
    return CodesplitConfig(
        splitter=draw(splitter_config_strategy()),
        pool=draw(pool_config_strategy()),
        logging=draw(logging_config_strategy()),
    )


@given(config=codesplit_config_strategy())
@settings(max_examples=100)
def test_config_yaml_round_trip(config: CodesplitConfig):
    """
    For any valid CodesplitConfig, saving to YAML and loading it back
    produces an equivalent configuration.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yaml_path = Path(tmpdir) / "config.yaml"
        config.save(yaml_path)
        loaded_config = CodesplitConfig.from_file(yaml_path)
        assert config.to_dict() == loaded_config.to_dict()


@given(config=codesplit_config_strategy())
@settings(max_examples=100)
def test_config_json_round_trip(config: CodesplitConfig):
    """
    For any valid CodesplitConfig, saving to JSON and loading it back
    produces an equivalent configuration.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        json_path = Path(tmpdir) / "config.json"
        config.save(json_path)
        loaded_config = CodesplitConfig.from_file(json_path)
        assert config.to_dict() == loaded_config.to_dict()


class TestDefaults:
    """Tests for values loaded from defaults.yaml."""

    def test_splitter_defaults(self):
        config = SplitterConfig()
        assert config.chunk_size == 500
        assert config.chunk_overlap == 100
        assert config.include_context is True
        assert config.context_lines == 3
        assert config.min_chunk_chars == 50
        assert config.max_tokens == 8192

    def test_pool_defaults(self):
        config = PoolConfig()
        assert config.initial_size == 3
        assert config.max_size == 10
        assert config.acquire_timeout is None

    def test_logging_defaults(self):
        assert LoggingConfig().level == "INFO"


class TestValidation:
    """Tests for section validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"chunk_size": 0},
            {"chunk_size": 100, "chunk_overlap": 100},
            {"chunk_overlap": -1},
            {"context_lines": -1},
        ],
    )
    def test_invalid_splitter_config(self, kwargs):
        with pytest.raises(ValueError):
            SplitterConfig(**kwargs)

    def test_invalid_pool_config(self):
        with pytest.raises(ValueError):
            PoolConfig(max_size=0)
        with pytest.raises(ValueError):
            PoolConfig(initial_size=-1)

    def test_unsupported_file_format(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            CodesplitConfig.from_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CodesplitConfig.from_file(tmp_path / "missing.yaml")

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("splitter:\n  chunk_size: 800\n", encoding="utf-8")
        config = CodesplitConfig.from_file(path)
        assert config.splitter.chunk_size == 800
        assert config.splitter.chunk_overlap == 100
        assert config.pool.max_size == 10


class TestEnvOverrides:
    """Tests for CODESPLIT_<SECTION>_<KEY> overrides."""

    def test_env_overrides_applied(self, monkeypatch):
        monkeypatch.setenv("CODESPLIT_SPLITTER_CHUNK_SIZE", "1000")
        monkeypatch.setenv("CODESPLIT_SPLITTER_INCLUDE_CONTEXT", "false")
        monkeypatch.setenv("CODESPLIT_SPLITTER_MAX_TOKENS", "none")
        monkeypatch.setenv("CODESPLIT_POOL_MAX_SIZE", "4")
        monkeypatch.setenv("CODESPLIT_POOL_ACQUIRE_TIMEOUT", "2.5")
        monkeypatch.setenv("CODESPLIT_LOGGING_LEVEL", "DEBUG")

        config = load_config()

        assert config.splitter.chunk_size == 1000
        assert config.splitter.include_context is False
        assert config.splitter.max_tokens is None
        assert config.pool.max_size == 4
        assert config.pool.acquire_timeout == 2.5
        assert config.logging.level == "DEBUG"

    def test_env_overrides_validated(self, monkeypatch):
        monkeypatch.setenv("CODESPLIT_SPLITTER_CHUNK_OVERLAP", "900")
        with pytest.raises(ValueError):
            load_config()

    def test_env_overrides_skipped(self, monkeypatch):
        monkeypatch.setenv("CODESPLIT_SPLITTER_CHUNK_SIZE", "1000")
        assert load_config(apply_env=False).splitter.chunk_size == 500
