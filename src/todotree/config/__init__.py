"""Configuration module."""

from todotree.config.loader import get_default_config, load_config
from todotree.config.models import ConfigError, DisplayConfig, TodoTreeConfig
from todotree.config.paths import (
    get_config_path,
    get_default_todo_path,
    get_logs_path,
    get_todotree_home,
)

__all__ = [
    "ConfigError",
    "DisplayConfig",
    "TodoTreeConfig",
    "get_config_path",
    "get_default_config",
    "get_default_todo_path",
    "get_logs_path",
    "get_todotree_home",
    "load_config",
]
