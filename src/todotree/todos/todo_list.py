"""Ordered, file-backed todo list.

One list is stored as one text file with an item per line (see
``todotree.todos.item``). Items are kept in a single sequence, undone items
first, sorted by ``Todo.comparison_value``. Views such as "undone only" are
restrictions applied on access instead of separate arrays.

Dirty tracking: every list method that changes the sequence marks the list
dirty. Callers that mutate an item in place (toggle, priority, dependency)
must call ``mark_dirty()`` themselves. ``write()`` only touches the disk when
the list is dirty.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from todotree.todos.display import DisplayOptions
from todotree.todos.errors import ParseFailedError
from todotree.todos.item import Todo
from todotree.todos.restrictions import Restriction, no_restriction

logger = logging.getLogger(__name__)


def _key(todo: Todo) -> int:
    return todo.comparison_value()


@dataclass
class TodoList:
    todos: list[Todo] = field(default_factory=list)
    dirty: bool = field(default=False, compare=False)
    # Lines dropped by the last read because they did not parse.
    skipped_lines: int = field(default=0, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.todos)

    def __iter__(self) -> Iterator[Todo]:
        return iter(self.todos)

    def __getitem__(self, index: int) -> Todo:
        return self.todos[index]

    def mark_dirty(self) -> None:
        self.dirty = True

    def mark_clean(self) -> None:
        self.dirty = False

    def mark_subtree_dirty(self) -> None:
        """Mark this list and every dependency below it for rewriting."""
        self.dirty = True
        for todo in self.todos:
            todo.dependency.mark_unwritten()

    # ------------------------------------------------------------------
    # Restricted access
    # ------------------------------------------------------------------

    def iter(self, restriction: Restriction = no_restriction) -> Iterator[Todo]:
        return (todo for todo in self.todos if restriction(todo))

    def count(self, restriction: Restriction = no_restriction) -> int:
        return sum(1 for _ in self.iter(restriction))

    def is_empty(self, restriction: Restriction = no_restriction) -> bool:
        return next(self.iter(restriction), None) is None

    def get(self, index: int, restriction: Restriction = no_restriction) -> Todo | None:
        """Return the ``index``-th item that passes ``restriction``."""
        if index < 0:
            return None
        for i, todo in enumerate(self.iter(restriction)):
            if i == index:
                return todo
        return None

    def true_position(
        self, index: int, restriction: Restriction = no_restriction
    ) -> int:
        """Map a position in the restricted view to a storage position.

        Raises:
            IndexError: If the view has no item at ``index``.
        """
        if index >= 0:
            seen = 0
            for position, todo in enumerate(self.todos):
                if not restriction(todo):
                    continue
                if seen == index:
                    return position
                seen += 1
        raise IndexError(f"no todo at index {index}")

    def messages(self, restriction: Restriction = no_restriction) -> list[str]:
        return [todo.message for todo in self.iter(restriction)]

    def search(
        self, query: str, restriction: Restriction = no_restriction
    ) -> list[int]:
        """Storage positions of items whose message contains ``query``."""
        if not query:
            return []
        return [
            position
            for position, todo in enumerate(self.todos)
            if restriction(todo) and todo.matches(query)
        ]

    # ------------------------------------------------------------------
    # Structural mutation
    # ------------------------------------------------------------------

    def push(self, todo: Todo) -> None:
        self.dirty = True
        self.todos.append(todo)

    def prepend(self, todo: Todo) -> None:
        self.dirty = True
        self.todos.insert(0, todo)

    def insert(self, index: int, todo: Todo) -> None:
        self.dirty = True
        self.todos.insert(index, todo)

    def remove(self, index: int, restriction: Restriction = no_restriction) -> Todo:
        position = self.true_position(index, restriction)
        self.dirty = True
        return self.todos.pop(position)

    def remove_matching(self, restriction: Restriction) -> list[Todo]:
        """Remove every item passing ``restriction`` and return them."""
        removed = [todo for todo in self.todos if restriction(todo)]
        if removed:
            self.dirty = True
            self.todos = [todo for todo in self.todos if not restriction(todo)]
        return removed

    def append_list(self, other: TodoList | Iterable[Todo]) -> None:
        self.dirty = True
        self.todos.extend(other)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def sort(self) -> None:
        """Full stable sort; for initial load and bulk appends."""
        self.dirty = True
        self.todos.sort(key=_key)

    def is_sorted(self) -> bool:
        return all(
            _key(self.todos[i]) <= _key(self.todos[i + 1])
            for i in range(len(self.todos) - 1)
        )

    def reorder(self, index: int) -> int:
        """Move the item at ``index`` to its sorted position.

        The rest of the list must already be sorted. The item is moved with
        adjacent swaps so every other item keeps its relative order.
        Returns the item's new position.
        """
        if not 0 <= index < len(self.todos):
            raise IndexError(f"no todo at index {index}")
        self.dirty = True
        key = _key(self.todos[index])
        if key < _key(self.todos[0]):
            return self.move_index(index, 0, 1)

        low, high = self._reorder_window(index, key)
        for i in range(low, high):
            if key < _key(self.todos[i + 1]) and key >= _key(self.todos[i]):
                return self.move_index(index, i, 0)
        return self.move_index(index, high, 0)

    def reorder_last(self) -> int:
        return self.reorder(len(self.todos) - 1)

    def _reorder_window(self, index: int, key: int) -> tuple[int, int]:
        if index + 1 < len(self.todos) and key > _key(self.todos[index + 1]):
            # Less urgent than its successor: look further down.
            return index + 1, len(self.todos) - 1
        return 0, index

    def move_index(self, source: int, target: int, shift: int) -> int:
        """Bubble ``source`` towards ``target`` with adjacent swaps.

        Moving down lands on ``target``; moving up lands on
        ``target + 1 - shift``. Returns the final position.
        """
        todos = self.todos
        position = source
        if source < target:
            for j in range(source, target):
                todos[j], todos[j + 1] = todos[j + 1], todos[j]
                position = j + 1
        else:
            for j in range(source - 1, target - shift, -1):
                todos[j], todos[j + 1] = todos[j + 1], todos[j]
                position = j
        return position

    def fix_undone(self) -> int:
        """Move done items sitting in the undone region after it.

        The undone region ends at the last undone item. Relative order
        inside both regions is kept. Returns the number of items moved.
        """
        last_undone = max(
            (i for i, todo in enumerate(self.todos) if not todo.done), default=-1
        )
        misplaced = [todo for todo in self.todos[:last_undone] if todo.done]
        if not misplaced:
            return 0
        head = [todo for todo in self.todos[: last_undone + 1] if not todo.done]
        self.todos = head + misplaced + self.todos[last_undone + 1 :]
        self.dirty = True
        return len(misplaced)

    def fix_done(self) -> int:
        """Move undone items sitting in the done region before it.

        The done region starts at the first done item. Returns the number of
        items moved.
        """
        first_done = next(
            (i for i, todo in enumerate(self.todos) if todo.done), len(self.todos)
        )
        misplaced = [todo for todo in self.todos[first_done:] if not todo.done]
        if not misplaced:
            return 0
        tail = [todo for todo in self.todos[first_done:] if todo.done]
        self.todos = self.todos[:first_done] + misplaced + tail
        self.dirty = True
        return len(misplaced)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def read(cls, path: Path, today: date | None = None) -> TodoList:
        """Load and sort a list. A missing file is an empty list."""
        if not path.is_file():
            return cls()

        todos: list[Todo] = []
        skipped = 0
        # Only "\n" ends a line; messages may hold other line-break characters.
        lines = path.read_text(encoding="utf-8").split("\n")
        if lines[-1] == "":
            lines.pop()
        for line_number, line in enumerate(lines, start=1):
            try:
                todos.append(Todo.parse(line, today))
            except ParseFailedError:
                skipped += 1
                logger.debug(
                    "todo_parse_failed",
                    extra={"file.path": str(path), "file.line": line_number},
                )

        todo_list = cls(todos, skipped_lines=skipped)
        todo_list.sort()
        todo_list.mark_clean()
        if skipped:
            logger.warning(
                "todo_lines_skipped",
                extra={"file.path": str(path), "count": skipped},
            )
        return todo_list

    def read_dependencies(self, base_dir: Path, today: date | None = None) -> None:
        for todo in self.todos:
            todo.dependency.read(base_dir, today)

    def encode(self) -> str:
        return "".join(f"{todo.encode()}\n" for todo in self.todos)

    def force_write(self, path: Path) -> None:
        path.write_text(self.encode(), encoding="utf-8")
        logger.debug(
            "todo_list_written", extra={"file.path": str(path), "count": len(self)}
        )

    def write(self, path: Path) -> bool:
        """Write the list if dirty. Returns whether the file was written."""
        if not self.dirty:
            return False
        self.force_write(path)
        self.dirty = False
        return True

    def write_dependencies(self, base_dir: Path) -> None:
        for todo in self.todos:
            dependency = todo.dependency
            if dependency.is_list:
                dependency.todo_list.write_dependencies(base_dir)
            dependency.write(base_dir)

    def force_write_dependencies(self, base_dir: Path) -> None:
        for todo in self.todos:
            dependency = todo.dependency
            if dependency.is_list:
                dependency.todo_list.force_write_dependencies(base_dir)
            dependency.force_write(base_dir)

    def referenced_names(self) -> set[str]:
        """Every dependency file name reachable from this list."""
        names: set[str] = set()
        for todo in self.todos:
            dependency = todo.dependency
            if dependency.is_none:
                continue
            names.add(dependency.name)
            if dependency.is_list:
                names |= dependency.todo_list.referenced_names()
        return names

    def delete_dependency_files(
        self, base_dir: Path, keep: Collection[str] = ()
    ) -> int:
        """Delete the files of every item in this list, recursively."""
        return sum(todo.delete_dependency_files(base_dir, keep) for todo in self.todos)

    def delete_removed_dependency_files(
        self, base_dir: Path, keep: Collection[str] = ()
    ) -> int:
        """Delete files of detached dependencies at every level of the tree."""
        deleted = 0
        for todo in self.todos:
            if todo.dependency.is_list:
                deleted += todo.dependency.todo_list.delete_removed_dependency_files(
                    base_dir, keep
                )
            deleted += todo.delete_removed_dependency_files(base_dir, keep)
        return deleted

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def display(
        self,
        options: DisplayOptions | None = None,
        restriction: Restriction | None = None,
        today: date | None = None,
    ) -> list[str]:
        options = options or DisplayOptions()
        restriction = restriction or options.restriction()
        return [todo.display(options, today) for todo in self.iter(restriction)]

    def display_slice(
        self,
        start: int,
        count: int,
        options: DisplayOptions | None = None,
        restriction: Restriction | None = None,
        today: date | None = None,
    ) -> list[str]:
        return self.display(options, restriction, today)[start : start + count]
