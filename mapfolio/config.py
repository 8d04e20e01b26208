# mapfolio/config.py
"""
MAPFOLIO Configuration - Single source of truth via Pydantic Settings.

Resolution order: CLI flags > env vars (MAPFOLIO_*) > config file > defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MapfolioConfig(BaseSettings):
    """Central configuration for MAPFOLIO."""

    model_config = SettingsConfigDict(
        env_prefix="MAPFOLIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Project layout ---
    symbols_dir: str = "Symbols"
    renderers_dir: str = "Renderers"
    features_dir: str = "Features"
    layers_dir: str = "Layers"
    # Dotfiles (.DS_Store, editor swap files) are never assets.
    skip_hidden: bool = True

    # --- Layers ---
    default_editing_enabled: bool = True

    # --- Write-back ---
    # None writes compact JSON.
    json_indent: Optional[int] = None

    # --- Logging ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # --- Paths ---
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".mapfolio")

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"

    def directory_for(self, stage_dir_key: str) -> str:
        """Return the configured directory name for ``symbols``/``renderers``/..."""
        return getattr(self, f"{stage_dir_key}_dir")


@lru_cache(maxsize=1)
def get_config() -> MapfolioConfig:
    """Return the global config singleton."""
    return MapfolioConfig()
