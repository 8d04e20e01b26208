# tests/test_config.py
"""Tests for MapfolioConfig - Pydantic Settings single source of truth."""

from pathlib import Path

import pytest


class TestMapfolioConfig:
    """Test MapfolioConfig defaults and overrides."""

    def test_default_values(self):
        """Config should have sensible defaults without any env vars."""
        from mapfolio.config import MapfolioConfig

        cfg = MapfolioConfig()
        assert cfg.symbols_dir == "Symbols"
        assert cfg.renderers_dir == "Renderers"
        assert cfg.features_dir == "Features"
        assert cfg.layers_dir == "Layers"
        assert cfg.skip_hidden is True
        assert cfg.default_editing_enabled is True
        assert cfg.json_indent is None
        assert cfg.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        """Environment variables with MAPFOLIO_ prefix override defaults."""
        from mapfolio.config import MapfolioConfig

        monkeypatch.setenv("MAPFOLIO_SYMBOLS_DIR", "symbology")
        monkeypatch.setenv("MAPFOLIO_JSON_INDENT", "2")
        monkeypatch.setenv("MAPFOLIO_DEFAULT_EDITING_ENABLED", "false")
        cfg = MapfolioConfig()
        assert cfg.symbols_dir == "symbology"
        assert cfg.json_indent == 2
        assert cfg.default_editing_enabled is False

    def test_invalid_log_level_rejected(self, monkeypatch):
        """An unknown log level is refused at construction."""
        from pydantic import ValidationError

        from mapfolio.config import MapfolioConfig

        monkeypatch.setenv("MAPFOLIO_LOG_LEVEL", "CHATTY")
        with pytest.raises(ValidationError):
            MapfolioConfig()

    def test_home_dir_default(self):
        """home_dir defaults to ~/.mapfolio."""
        from mapfolio.config import MapfolioConfig

        cfg = MapfolioConfig()
        assert cfg.home_dir == Path.home() / ".mapfolio"

    def test_derived_paths(self, tmp_path):
        """The log directory sits under the home directory."""
        from mapfolio.config import MapfolioConfig

        cfg = MapfolioConfig(home_dir=tmp_path)
        assert cfg.log_dir == tmp_path / "logs"

    def test_directory_for_stage(self):
        """Each load stage maps to its configured directory name."""
        from mapfolio.config import MapfolioConfig
        from mapfolio.project.stages import PIPELINE

        cfg = MapfolioConfig(layers_dir="maps")
        assert [cfg.directory_for(s.value) for s in PIPELINE] == [
            "Symbols", "Renderers", "Features", "maps",
        ]


class TestGetConfig:

    def test_singleton(self):
        """get_config should return the same cached instance."""
        from mapfolio.config import get_config

        assert get_config() is get_config()

    def test_cache_clear_picks_up_env(self, monkeypatch):
        """Clearing the cache re-reads the environment."""
        from mapfolio.config import get_config

        monkeypatch.setenv("MAPFOLIO_FEATURES_DIR", "Data")
        get_config.cache_clear()
        assert get_config().features_dir == "Data"
