"""Pydantic configuration schema for YAML settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ConfigurationError

CONNECTION_STRING_NAME = "TableStorage"
CONNECTION_STRING_ENV = "TABLE_STORAGE_CONN_STRING"
DEFAULT_TABLE_NAME = "Candidates"


class StorageConfig(BaseModel):
    table_name: str = DEFAULT_TABLE_NAME

    model_config = ConfigDict(extra="forbid")


class SeedingConfig(BaseModel):
    enabled: bool = True
    candidates_path: Path = Path("candidates.json")

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = True

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    connection_strings: dict[str, str] = Field(default_factory=dict)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    seeding: SeedingConfig = Field(default_factory=SeedingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")

    def connection_string(self, name: str = CONNECTION_STRING_NAME) -> str:
        """Resolve a named connection string, falling back to the environment."""
        value = self.connection_strings.get(name) or os.environ.get(CONNECTION_STRING_ENV)
        if not value or not value.strip():
            raise ConfigurationError(
                f"{CONNECTION_STRING_ENV} environment variable or "
                f"connection_strings.{name} setting is required"
            )
        return value


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ConfigurationError("Config must be a mapping")
    return AppConfig.model_validate(raw)
