"""Centralized path management for todotree.

Configuration and logs live under a single base directory, overridable with
the TODOTREE_HOME environment variable. The todo file itself defaults to the
calcurse location so existing lists are picked up without configuration.

Default locations:
- ~/.todotree (config.toml, logs/)
- ~/.local/share/calcurse/todo (todo file, notes/ beside it)
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "TODOTREE_HOME"


@lru_cache(maxsize=1)
def get_todotree_home() -> Path:
    """Get the base directory for todotree configuration and logs.

    Resolution order:
    1. TODOTREE_HOME environment variable (if set)
    2. ~/.todotree
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".todotree"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_todotree_home() / "config.toml"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_todotree_home() / "logs"


def get_default_todo_path() -> Path:
    return Path.home() / ".local" / "share" / "calcurse" / "todo"
