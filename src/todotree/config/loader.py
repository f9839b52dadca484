"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from todotree.config.models import ConfigError, TodoTreeConfig
from todotree.config.paths import get_config_path

TODO_PATH_ENV_VAR = "TODOTREE_TODO_PATH"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("todotree.toml"),  # Current directory
        get_config_path(),  # ~/.todotree/config.toml (or TODOTREE_HOME)
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    if todo_path := os.environ.get(TODO_PATH_ENV_VAR):
        config["todo_path"] = todo_path
    return config


def load_config(path: Path | None = None) -> TodoTreeConfig:
    """Load configuration from a TOML file.

    Without an explicit path the default locations are searched and, when
    none exists, defaults are used.

    Raises:
        FileNotFoundError: If an explicit config file does not exist.
        ConfigError: If the file is not valid TOML.
        pydantic.ValidationError: If the values are invalid.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    return TodoTreeConfig.model_validate(_apply_env_overrides(raw_config))


def get_default_config() -> TodoTreeConfig:
    """Get a default configuration for development/testing."""
    return TodoTreeConfig()
