"""Shared test fixtures and factories."""

from datetime import date
from pathlib import Path

import pytest

from todotree.config.paths import ENV_VAR, get_todotree_home
from todotree.todos import Todo, TodoList

TODAY = date(2024, 5, 10)

SAMPLE_TODO_FILE = """\
[1] this todo has prio 1
[2] this one has prio 2
[-2] this one is 2 and done
[-0] this one is 0 and done
"""


def make_list(*specs: tuple[str, int, bool]) -> TodoList:
    """Build a list from (message, priority, done) tuples, in the given order."""
    todos = [Todo(message, priority, done) for message, priority, done in specs]
    return TodoList(todos)


def keys(todo_list: TodoList) -> list[int]:
    return [todo.comparison_value() for todo in todo_list]


# =============================================================================
# Todo File Fixtures
# =============================================================================


@pytest.fixture
def today() -> date:
    """Fixed date used for schedule logic."""
    return TODAY


@pytest.fixture
def todo_path(tmp_path: Path) -> Path:
    """Location of a todo file that does not exist yet."""
    return tmp_path / "data" / "todo"


@pytest.fixture
def sample_todo_file(todo_path: Path) -> Path:
    """A todo file with two undone and two done todos."""
    todo_path.parent.mkdir(parents=True, exist_ok=True)
    todo_path.write_text(SAMPLE_TODO_FILE)
    return todo_path


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def todotree_home(tmp_path: Path, monkeypatch) -> Path:
    """Point TODOTREE_HOME at a temporary directory."""
    home = tmp_path / "home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("TODOTREE_TODO_PATH", raising=False)
    monkeypatch.delenv("TODOTREE_LOG_LEVEL", raising=False)
    get_todotree_home.cache_clear()
    yield home
    get_todotree_home.cache_clear()


@pytest.fixture
def config_toml_content(todo_path: Path) -> str:
    """Valid TOML config content."""
    return f"""
todo_path = "{todo_path}"
tree = true
log_level = "info"

[display]
show_done = true
done_string = "(done) "
undone_string = "(open) "
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
