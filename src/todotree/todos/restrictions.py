"""Predicates used to view a list without copying it."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from todotree.todos.item import Todo

Restriction = Callable[["Todo"], bool]


def no_restriction(todo: Todo) -> bool:
    return True


def undone_only(todo: Todo) -> bool:
    return not todo.done


def done_only(todo: Todo) -> bool:
    return todo.done


def query_restriction(query: str) -> Restriction:
    """Case-insensitive substring match on the message."""
    return lambda todo: todo.matches(query)


def all_of(*restrictions: Restriction) -> Restriction:
    return lambda todo: all(restriction(todo) for restriction in restrictions)
