"""Todo management commands.

Todos are addressed by dotted 1-based positions: ``3`` is the third root
todo, ``3.1`` the first todo in its nested list.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from todotree.cli.console import (
    confirm_or_cancel,
    console,
    create_table,
    dim,
    error,
    plain,
    success,
    warning,
)
from todotree.cli.runtime import (
    CliState,
    bootstrap_runtime,
    format_address,
    load_settings,
    parse_address,
    save,
)
from todotree.todos import (
    DisplayOptions,
    TodoError,
    TodoTree,
    TreePath,
    no_restriction,
)

InOption = Annotated[
    str | None,
    typer.Option("--in", "-i", help="Address of the todo owning the list"),
]


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Turn store errors into a red message and exit code 1."""
    try:
        yield
    except (TodoError, IndexError) as e:
        error(escape(str(e)))
        raise typer.Exit(1) from None


def _split_address(address: str) -> tuple[TreePath, int]:
    path = parse_address(address)
    return path[:-1], path[-1]


def _list_path(address: str | None) -> TreePath:
    return parse_address(address) if address else ()


def _print_list(
    tree: TodoTree,
    path: TreePath,
    options: DisplayOptions,
    *,
    nested: bool,
    minimal: bool,
    depth: int = 0,
) -> None:
    restriction = options.restriction()
    indent = "  " * depth
    for index, todo in enumerate(tree.list_at(path)):
        if not restriction(todo):
            continue
        if minimal:
            plain(f"{indent}{todo.message}")
        else:
            line = todo.display(options, tree.today)
            plain(f"{indent}{index + 1:>2}. {line}")
        if nested and todo.nested is not None:
            _print_list(
                tree,
                (*path, index),
                options,
                nested=nested,
                minimal=minimal,
                depth=depth + 1,
            )


def register(app: typer.Typer) -> None:
    """Register the todo commands."""

    @app.command("list")
    def list_cmd(
        ctx: typer.Context,
        show_done: Annotated[
            bool, typer.Option("--done", "-d", help="Include completed todos")
        ] = False,
        flat: Annotated[
            bool, typer.Option("--flat", help="Do not expand nested lists")
        ] = False,
        minimal: Annotated[
            bool, typer.Option("--minimal", "-m", help="Print messages only")
        ] = False,
        in_address: InOption = None,
    ) -> None:
        """List todos."""
        runtime = bootstrap_runtime(ctx.obj)
        options = runtime.config.display.to_options()
        if show_done:
            options = DisplayOptions(
                show_done=True,
                done_string=options.done_string,
                undone_string=options.undone_string,
            )
        path = _list_path(in_address)
        with _handle_errors():
            todo_list = runtime.tree.list_at(path)
            if todo_list.is_empty(options.restriction()):
                warning("No todos found")
                return
            _print_list(
                runtime.tree,
                path,
                options,
                nested=runtime.tree.tree and not flat,
                minimal=minimal,
            )

    @app.command("add")
    def add_cmd(
        ctx: typer.Context,
        message: Annotated[str, typer.Argument(help="Todo text")],
        priority: Annotated[
            int, typer.Option("--priority", "-p", help="Priority 1-9, 0 for none")
        ] = 0,
        in_address: InOption = None,
    ) -> None:
        """Add a todo in priority order."""
        runtime = bootstrap_runtime(ctx.obj)
        path = _list_path(in_address)
        with _handle_errors():
            index = runtime.tree.append(path, message, priority)
        save(runtime.tree)
        success(f"Added {format_address(path, index)}: {escape(message)}")

    @app.command("prepend")
    def prepend_cmd(
        ctx: typer.Context,
        message: Annotated[str, typer.Argument(help="Todo text")],
        priority: Annotated[
            int, typer.Option("--priority", "-p", help="Priority 1-9, 0 for none")
        ] = 1,
        in_address: InOption = None,
    ) -> None:
        """Add a todo at the top of its priority group."""
        runtime = bootstrap_runtime(ctx.obj)
        path = _list_path(in_address)
        with _handle_errors():
            index = runtime.tree.prepend(path, message, priority)
        save(runtime.tree)
        success(f"Added {format_address(path, index)}: {escape(message)}")

    @app.command("done")
    def done_cmd(
        ctx: typer.Context,
        address: Annotated[
            str | None, typer.Argument(help="Address of the todo to toggle")
        ] = None,
        search: Annotated[
            str | None,
            typer.Option("--search", "-s", help="Complete every matching todo"),
        ] = None,
        in_address: InOption = None,
    ) -> None:
        """Toggle a todo done, or complete every todo matching a search."""
        if (address is None) == (search is None):
            error("give either an address or --search")
            raise typer.Exit(1)

        runtime = bootstrap_runtime(ctx.obj)
        tree = runtime.tree
        with _handle_errors():
            if search is not None:
                count = tree.complete_matching(_list_path(in_address), search)
                if not count:
                    warning(f"No undone todos match {escape(repr(search))}")
                    return
                save(tree)
                success(f"Completed {count} todo(s)")
                return

            path, index = _split_address(address)
            todo = tree.item_at(path, index)
            stopped = tree.toggle_done(path, index)

        save(tree)
        state = "done" if todo.done else "undone"
        success(f"Marked {escape(repr(todo.message))} {state}")
        if stopped.path != path:
            level = format_address(stopped.path) or "root"
            dim(f"Completed parent todos up to {level}")

    @app.command("remove")
    def remove_cmd(
        ctx: typer.Context,
        address: Annotated[str, typer.Argument(help="Address of the todo")],
        yes: Annotated[
            bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")
        ] = False,
    ) -> None:
        """Remove a todo together with its note or nested list."""
        runtime = bootstrap_runtime(ctx.obj)
        path, index = _split_address(address)
        with _handle_errors():
            todo = runtime.tree.item_at(path, index)
            if not todo.dependency.is_none and not confirm_or_cancel(
                f"{todo.message!r} has a {todo.dependency.mode.value}. Remove it?",
                yes,
            ):
                return
            runtime.tree.remove(path, index)
        save(runtime.tree)
        success(f"Removed {escape(repr(todo.message))}")

    @app.command("note")
    def note_cmd(
        ctx: typer.Context,
        address: Annotated[str, typer.Argument(help="Address of the todo")],
        text: Annotated[
            str | None, typer.Argument(help="Note text; omit to print the note")
        ] = None,
    ) -> None:
        """Show or replace a todo's note."""
        runtime = bootstrap_runtime(ctx.obj)
        path, index = _split_address(address)
        with _handle_errors():
            if text is None:
                note = runtime.tree.note_at(path, index)
                if note is None:
                    warning("Todo has no note")
                    raise typer.Exit(1)
                plain(note.rstrip("\n"))
                return
            runtime.tree.attach_note(path, index, text)
        save(runtime.tree)
        success("Note saved")

    @app.command("nest")
    def nest_cmd(
        ctx: typer.Context,
        address: Annotated[str, typer.Argument(help="Address of the todo")],
    ) -> None:
        """Give a todo an empty nested list."""
        runtime = bootstrap_runtime(ctx.obj)
        path, index = _split_address(address)
        with _handle_errors():
            nested_path = runtime.tree.attach_list(path, index)
        save(runtime.tree)
        success(f"Nested list created at {format_address(nested_path)}")

    @app.command("detach")
    def detach_cmd(
        ctx: typer.Context,
        address: Annotated[str, typer.Argument(help="Address of the todo")],
    ) -> None:
        """Drop a todo's note or nested list."""
        runtime = bootstrap_runtime(ctx.obj)
        path, index = _split_address(address)
        with _handle_errors():
            detached = runtime.tree.detach(path, index)
        if not detached:
            warning("Todo has no note or nested list")
            return
        save(runtime.tree)
        success("Detached")

    @app.command("search")
    def search_cmd(
        ctx: typer.Context,
        query: Annotated[str, typer.Argument(help="Text to look for")],
    ) -> None:
        """Search every list for todos containing a text."""
        runtime = bootstrap_runtime(ctx.obj)
        tree = runtime.tree
        hits = tree.search_tree(query, no_restriction)
        if not hits:
            warning(f"No todos match {escape(repr(query))}")
            return

        options = runtime.config.display.to_options()
        table = create_table(
            f"Todos matching {query!r}",
            [("Address", "cyan"), ("Todo", {"style": "white", "markup": False})],
        )
        for hit in hits:
            todo_list = tree.list_at(hit.path)
            for index in hit.indices:
                table.add_row(
                    format_address(hit.path, index),
                    todo_list[index].display(options, tree.today),
                )
        console.print(table)

    @app.command("stdout")
    def stdout_cmd(ctx: typer.Context) -> None:
        """Print the raw todo file."""
        config = load_settings(ctx.obj)
        if config.todo_path.is_file():
            typer.echo(config.todo_path.read_text(encoding="utf-8"), nl=False)

    @app.command("export")
    def export_cmd(
        ctx: typer.Context,
        target: Annotated[Path, typer.Argument(help="File to write")],
        in_address: InOption = None,
    ) -> None:
        """Copy a list, with its notes and nested lists, to another file."""
        runtime = bootstrap_runtime(ctx.obj)
        with _handle_errors():
            runtime.tree.export(target.expanduser(), _list_path(in_address))
        success(f"Exported to {target}")

    @app.command("path")
    def path_cmd(ctx: typer.Context) -> None:
        """Print the todo file location."""
        state: CliState = ctx.obj
        config = load_settings(state)
        typer.echo(str(config.todo_path))
