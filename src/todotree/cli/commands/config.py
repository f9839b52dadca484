"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from todotree.cli.console import console, create_table, error, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $TODOTREE_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Manage configuration."""
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from pydantic import ValidationError
        from rich.markup import escape
        from rich.syntax import Syntax

        from todotree.config import ConfigError, load_config
        from todotree.config.paths import get_config_path

        expanded_path = path.expanduser() if path else get_config_path()

        if action == "show":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                console.print("Defaults are used until one is created")
                raise typer.Exit(1)

            content = expanded_path.read_text()
            syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
            console.print(f"[bold]Config file: {expanded_path}[/bold]\n")
            console.print(syntax)

        elif action == "validate":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            try:
                config_obj = load_config(expanded_path)
            except ConfigError as e:
                error(escape(str(e)))
                raise typer.Exit(1) from None
            except ValidationError as e:
                error("Configuration validation failed:")
                console.print()
                for err in e.errors():
                    loc = ".".join(str(x) for x in err["loc"])
                    console.print(f"  [yellow]{loc}[/yellow]: {err['msg']}")
                raise typer.Exit(1) from None

            table = create_table(
                "Configuration Summary",
                [("Setting", "cyan"), ("Value", "green")],
            )
            table.add_row("Todo file", str(config_obj.todo_path))
            table.add_row("Notes and nested lists", "on" if config_obj.tree else "off")
            table.add_row(
                "Show done", "yes" if config_obj.display.show_done else "no"
            )
            table.add_row("Log level", config_obj.log_level or "[dim]default[/dim]")

            success("Configuration is valid!")
            console.print()
            console.print(table)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate")
            raise typer.Exit(1)
