"""A single todo item and its line encoding.

Line grammar::

    [<done-marker><priority>]<dependency> <message><schedule>

``done-marker`` is ``-`` for done items, ``dependency`` is ``>`` plus the
dependency file name, ``schedule`` is `` [D<days>(<date>)]`` or
`` [R(<date>)]``. Examples::

    [1] call the bank
    [-0]>900a80c94f076b4ee7006a9747667ccf6878a72b.todo move house
    [2] water plants [D3(2024-05-01)]
"""

from __future__ import annotations

import re
from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from todotree.todos.dependency import Dependency, sha1
from todotree.todos.display import DisplayOptions
from todotree.todos.errors import (
    DependencyAlreadyExistsError,
    NoteEmptyError,
    ParseFailedError,
)
from todotree.todos.schedule import Schedule

if TYPE_CHECKING:
    from todotree.todos.todo_list import TodoList

# 0 sorts after every literal rank.
PRIORITY_SENTINEL = 0
MAX_PRIORITY = 9
# Added to the key of done items so they always sort after undone ones.
DONE_OFFSET = 100

_LINE_RE = re.compile(
    r"^\[(?P<priority>[^\]]*)\](?:>(?P<dependency>\S+))? (?P<message>.*)$"
)


def fixed_priority(priority: int) -> int:
    """Collapse out-of-range priorities to the sentinel."""
    if 1 <= priority <= MAX_PRIORITY:
        return priority
    return PRIORITY_SENTINEL


def comparison_priority(priority: int) -> int:
    return 10 if priority == PRIORITY_SENTINEL else priority


@dataclass
class Todo:
    message: str
    priority: int = PRIORITY_SENTINEL
    done: bool = False
    schedule: Schedule = field(default_factory=Schedule)
    dependency: Dependency = field(default_factory=Dependency)
    # Detached dependencies waiting for their files to be deleted on write.
    removed_dependencies: list[Dependency] = field(
        default_factory=list, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        self.priority = fixed_priority(self.priority)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, line: str, today: date | None = None) -> Todo:
        """Parse one line of a todo file.

        Raises:
            ParseFailedError: If the line does not match the grammar.
        """
        match = _LINE_RE.match(line.rstrip("\r\n"))
        if match is None:
            raise ParseFailedError(line)

        priority_str = match.group("priority")
        message, schedule = Schedule.split_message(match.group("message"))
        if not message:
            raise ParseFailedError(line)

        try:
            priority = abs(int(priority_str))
        except ValueError:
            priority = PRIORITY_SENTINEL

        done = priority_str.startswith("-")
        if done and schedule.should_undone(today):
            done = False

        return cls(
            message=message,
            priority=priority,
            done=done,
            schedule=schedule,
            dependency=Dependency.from_name(match.group("dependency") or ""),
        )

    def encode(self) -> str:
        done_str = "-" if self.done else ""
        return (
            f"[{done_str}{self.priority}]{self.dependency.encode()} "
            f"{self.message}{self.schedule.encode()}"
        )

    def __str__(self) -> str:
        return self.encode()

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def comparison_value(self) -> int:
        """Sort key: undone before done, urgent first, reminders win ties."""
        value = comparison_priority(self.priority) * 2
        if self.schedule.is_reminder:
            value -= 1
        if self.done:
            value += DONE_OFFSET
        return value

    def content_hash(self) -> str:
        return sha1(f"{self.priority} {self.message}")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_priority(self, priority: int) -> None:
        self.priority = fixed_priority(priority)

    def increase_priority(self) -> None:
        current = comparison_priority(self.priority)
        self.priority = current - 1 if current > 1 else 1

    def decrease_priority(self) -> None:
        current = comparison_priority(self.priority)
        self.priority = current + 1 if current < MAX_PRIORITY else PRIORITY_SENTINEL

    def set_done(self, done: bool, today: date | None = None) -> None:
        if done == self.done:
            return
        self.schedule.stamp_today(today)
        self.done = done

    def toggle_done(self, today: date | None = None) -> None:
        self.set_done(not self.done, today)

    def matches(self, query: str) -> bool:
        return query.lower() in self.message.lower()

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    @property
    def note(self) -> str | None:
        return self.dependency.note if self.dependency.is_note else None

    @property
    def nested(self) -> TodoList | None:
        return self.dependency.todo_list if self.dependency.is_list else None

    def attach_list(self) -> TodoList:
        """Attach an empty nested list named after this item.

        Raises:
            DependencyAlreadyExistsError: If a note or list is attached.
        """
        if not self.dependency.is_none:
            raise DependencyAlreadyExistsError(
                f"todo already has a {self.dependency.mode.value} dependency"
            )
        self.dependency = Dependency.new_list(self.content_hash())
        return self.dependency.todo_list

    def attach_note(self, text: str) -> None:
        """Attach a note, replacing (and parking) any previous dependency.

        Raises:
            NoteEmptyError: If the note has no content.
        """
        if not text.strip():
            raise NoteEmptyError("note is empty")
        if not self.dependency.is_none:
            self.detach()
        self.dependency = Dependency.new_note(self.content_hash(), text)

    def detach(self) -> Dependency | None:
        """Park the current dependency for deletion on the next write."""
        if self.dependency.is_none:
            return None
        parked = self.dependency
        self.removed_dependencies.append(parked)
        self.dependency = Dependency()
        return parked

    def remove_note(self) -> Dependency | None:
        if self.dependency.is_note:
            return self.detach()
        return None

    def delete_dependency_files(
        self, base_dir: Path, keep: Collection[str] = ()
    ) -> int:
        """Delete every file this item owns, parked ones included."""
        deleted = self.dependency.delete_files(base_dir, keep)
        return deleted + self.delete_removed_dependency_files(base_dir, keep)

    def delete_removed_dependency_files(
        self, base_dir: Path, keep: Collection[str] = ()
    ) -> int:
        deleted = 0
        for dependency in self.removed_dependencies:
            deleted += dependency.delete_files(base_dir, keep)
        self.removed_dependencies.clear()
        return deleted

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def display(
        self, options: DisplayOptions | None = None, today: date | None = None
    ) -> str:
        options = options or DisplayOptions()
        return (
            f"{options.prefix(self.done)}{self.priority}{self.dependency.marker()} "
            f"{self.message}{self.schedule.display(today)}"
        )
