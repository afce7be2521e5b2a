"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigurationError
from ..schemas.config import AppConfig, load_config


class ConfigManager:
    """YAML-backed settings loader rooted at a base directory."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML configuration by name without file extension."""
        path = self._base_path / f"{name}.yaml"
        return read_yaml(path)

    def settings(self, name: str = "settings") -> AppConfig:
        return load_config(self.load(name))


def read_yaml(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read settings file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Settings file {path} must contain a YAML mapping")
    return loaded


def load_settings(path: str | Path | None = None) -> AppConfig:
    """Return validated settings from ``path``, or defaults when no file is given."""
    if path is None:
        return AppConfig()
    return load_config(read_yaml(path))


__all__ = ["ConfigManager", "load_settings", "read_yaml"]
