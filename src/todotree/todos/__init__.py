"""Hierarchical prioritized todo store.

The public surface is re-exported here. ``TodoTree`` is the usual entry point;
``TodoList`` and ``Todo`` are usable on their own for single-file work.
"""

from todotree.todos.dependency import Dependency, DependencyMode, sha1
from todotree.todos.display import DisplayOptions
from todotree.todos.errors import (
    DependencyAlreadyExistsError,
    NoteEmptyError,
    ParseFailedError,
    PathError,
    TodoError,
)
from todotree.todos.item import Todo
from todotree.todos.restrictions import (
    Restriction,
    all_of,
    done_only,
    no_restriction,
    query_restriction,
    undone_only,
)
from todotree.todos.schedule import Schedule, ScheduleType
from todotree.todos.todo_list import TodoList
from todotree.todos.tree import (
    SearchHit,
    TodoTree,
    TreePath,
    TreePosition,
    notes_dir_for,
)

__all__ = [
    "Dependency",
    "DependencyAlreadyExistsError",
    "DependencyMode",
    "DisplayOptions",
    "NoteEmptyError",
    "ParseFailedError",
    "PathError",
    "Restriction",
    "Schedule",
    "ScheduleType",
    "SearchHit",
    "Todo",
    "TodoError",
    "TodoList",
    "TodoTree",
    "TreePath",
    "TreePosition",
    "all_of",
    "done_only",
    "no_restriction",
    "notes_dir_for",
    "query_restriction",
    "sha1",
    "undone_only",
]
