"""CLI command modules."""

from todotree.cli.commands import config, todo

__all__ = [
    "config",
    "todo",
]
