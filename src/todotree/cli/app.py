"""Main CLI application."""

from pathlib import Path
from typing import Annotated

import typer

from todotree.cli.commands import config, todo
from todotree.cli.runtime import CliState

app = typer.Typer(
    name="todotree",
    help="todotree - hierarchical prioritized todo lists",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    todo_path: Annotated[
        Path | None,
        typer.Option(
            "--todo-path",
            "-t",
            help="Todo file to use (default: from config)",
        ),
    ] = None,
    no_tree: Annotated[
        bool,
        typer.Option(
            "--no-tree",
            help="Ignore notes and nested lists",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show informational log output",
        ),
    ] = False,
) -> None:
    from todotree.logging import configure_logging

    configure_logging(level="INFO" if verbose else None, use_rich=True)
    ctx.obj = CliState(
        todo_path=todo_path,
        config_path=config_path,
        tree=not no_tree,
        verbose=verbose,
    )


todo.register(app)
config.register(app)


if __name__ == "__main__":
    app()
