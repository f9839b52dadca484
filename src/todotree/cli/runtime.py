"""Shared runtime bootstrap helpers for CLI entrypoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.markup import escape

from todotree.cli.console import error, warning
from todotree.config import ConfigError, TodoTreeConfig, load_config
from todotree.todos import TodoTree, TreePath


@dataclass(slots=True)
class CliState:
    """Global options shared by every command."""

    todo_path: Path | None = None
    config_path: Path | None = None
    tree: bool = True
    verbose: bool = False


@dataclass(slots=True)
class RuntimeBootstrap:
    """Loaded configuration and todo tree for a command handler."""

    config: TodoTreeConfig
    tree: TodoTree


def load_settings(state: CliState) -> TodoTreeConfig:
    """Load config and apply command line overrides; exit on errors."""
    try:
        config = load_config(state.config_path)
    except FileNotFoundError as e:
        error(escape(str(e)))
        raise typer.Exit(1) from None
    except (ConfigError, ValidationError) as e:
        error(f"Error loading config: {escape(str(e))}")
        raise typer.Exit(1) from None

    updates: dict[str, object] = {}
    if state.todo_path is not None:
        updates["todo_path"] = state.todo_path.expanduser()
    if not state.tree:
        updates["tree"] = False
    if updates:
        config = config.model_copy(update=updates)

    if config.log_level and not state.verbose:
        logging.getLogger().setLevel(config.log_level)
    return config


def bootstrap_runtime(state: CliState) -> RuntimeBootstrap:
    """Load config and open the configured todo tree."""
    config = load_settings(state)
    if config.todo_path.is_dir():
        error(f"Todo path is a directory: {config.todo_path}")
        raise typer.Exit(1)

    try:
        tree = TodoTree.open(config.todo_path, read_dependencies=config.tree)
    except OSError as e:
        error(escape(f"Could not read {config.todo_path}: {e}"))
        raise typer.Exit(1) from None

    if tree.root.skipped_lines:
        warning(
            f"Skipped {tree.root.skipped_lines} malformed line(s) in "
            f"{config.todo_path}; saving will drop them"
        )
    return RuntimeBootstrap(config=config, tree=tree)


def save(tree: TodoTree) -> None:
    """Write the tree; exit with an error if the disk write fails."""
    try:
        tree.write()
    except OSError as e:
        error(escape(f"Could not write {tree.todo_path}: {e}"))
        raise typer.Exit(1) from None


def parse_address(text: str) -> TreePath:
    """Parse a dotted 1-based address such as ``2.1`` into a tree path."""
    try:
        parts = tuple(int(part) - 1 for part in text.split("."))
    except ValueError:
        raise typer.BadParameter(f"invalid address: {text!r}") from None
    if any(part < 0 for part in parts):
        raise typer.BadParameter(f"invalid address: {text!r}")
    return parts


def format_address(path: TreePath, index: int | None = None) -> str:
    positions = [*path, index] if index is not None else list(path)
    return ".".join(str(position + 1) for position in positions)
