"""Configuration management for confimpact."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from confimpact.exceptions import ConfigError

CONFIG_DIR = ".confimpact"
CONFIG_FILE = "config.json"
HISTORY_FILE = ".confimpact_history.json"
HISTORY_ENV_VAR = "CONFIMPACT_HISTORY_FILE"


def default_history_path() -> str:
    return str(Path.home() / HISTORY_FILE)


class HistoryConfig(BaseModel):
    """Where and how much comparison history is kept."""

    path: str = Field(default_factory=default_history_path)
    max_entries: int = Field(default=100, ge=1)
    show_limit: int = Field(default=20, ge=1)


class ReportConfig(BaseModel):
    """Console report configuration."""

    max_listed: int = Field(default=10, ge=1)  # per change kind
    value_width: int = Field(default=50, ge=8)


class AppConfig(BaseModel):
    """Full application configuration."""

    history: HistoryConfig = Field(default_factory=HistoryConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


def default_config_path() -> Path:
    return Path.home() / CONFIG_DIR / CONFIG_FILE


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from ~/.confimpact/config.json (or `path`).

    Missing file means defaults. The history file location can be
    overridden with the CONFIMPACT_HISTORY_FILE environment variable.
    """
    config_path = Path(path) if path else default_config_path()
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            config = AppConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
    else:
        config = AppConfig()

    env_history = os.environ.get(HISTORY_ENV_VAR)
    if env_history:
        config.history.path = env_history
    return config


def save_config(config: AppConfig, path: str | Path | None = None) -> None:
    """Save configuration to ~/.confimpact/config.json (or `path`)."""
    config_path = Path(path) if path else default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.model_dump(), indent=2))
