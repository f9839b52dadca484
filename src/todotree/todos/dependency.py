"""Item dependencies: an attached note or a nested todo list.

Dependency files live in the list's notes directory and are named after the
sha1 of the owning item at the time the dependency was created:

- note: ``<sha1>``
- nested list: ``<sha1>.todo``
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from todotree.todos.todo_list import TodoList

logger = logging.getLogger(__name__)

LIST_SUFFIX = ".todo"


def sha1(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def _empty_list() -> TodoList:
    from todotree.todos.todo_list import TodoList  # local import to avoid cycle

    return TodoList()


class DependencyMode(StrEnum):
    NONE = "none"
    NOTE = "note"
    LIST = "list"


@dataclass
class Dependency:
    """A note or nested list owned by a single item."""

    mode: DependencyMode = DependencyMode.NONE
    name: str = ""
    note: str = ""
    todo_list: TodoList = field(default_factory=_empty_list)
    # Set once the file is known to match memory (read from or written to disk).
    written: bool = field(default=False, compare=False)

    @classmethod
    def new_list(cls, content_hash: str) -> Dependency:
        return cls(DependencyMode.LIST, f"{content_hash}{LIST_SUFFIX}")

    @classmethod
    def new_note(cls, content_hash: str, note: str) -> Dependency:
        return cls(DependencyMode.NOTE, content_hash, note)

    @classmethod
    def from_name(cls, name: str) -> Dependency:
        """Rebuild a dependency from the name stored on an item line."""
        if not name:
            return cls()
        if name.endswith(LIST_SUFFIX):
            return cls(DependencyMode.LIST, name)
        return cls(DependencyMode.NOTE, name)

    @property
    def is_none(self) -> bool:
        return self.mode == DependencyMode.NONE

    @property
    def is_note(self) -> bool:
        return self.mode == DependencyMode.NOTE

    @property
    def is_list(self) -> bool:
        return self.mode == DependencyMode.LIST

    @property
    def content_hash(self) -> str:
        return self.name.removesuffix(LIST_SUFFIX)

    def path(self, base_dir: Path) -> Path | None:
        if self.is_none:
            return None
        return base_dir / self.name

    def encode(self) -> str:
        return "" if self.is_none else f">{self.name}"

    def marker(self) -> str:
        if self.is_note:
            return ">"
        if self.is_list:
            return "-"
        return "."

    def read(self, base_dir: Path, today: date | None = None) -> None:
        """Load the note text or the nested list (and its own dependencies)."""
        if self.is_none:
            return
        file_path = base_dir / self.name
        if self.is_note:
            if file_path.is_file():
                self.note = file_path.read_text(encoding="utf-8")
                self.written = True
                return
            if (base_dir / f"{self.name}{LIST_SUFFIX}").is_file():
                logger.info(
                    "dependency_reclassified",
                    extra={"dependency.name": self.name},
                )
                self.name = f"{self.name}{LIST_SUFFIX}"
                self.mode = DependencyMode.LIST
                self.note = ""

        if self.is_list:
            from todotree.todos.todo_list import TodoList

            self.todo_list = TodoList.read(base_dir / self.name, today=today)
            self.todo_list.read_dependencies(base_dir, today=today)
        self.written = True

    def write(self, base_dir: Path) -> None:
        """Persist changes. Notes are written once, nested lists when dirty."""
        if self.is_list and not self.written:
            self.todo_list.force_write(base_dir / self.name)
            self.todo_list.mark_clean()
        elif self.is_list:
            self.todo_list.write(base_dir / self.name)
        elif self.is_note and not self.written:
            self._write_note(base_dir)
        self.written = True

    def force_write(self, base_dir: Path) -> None:
        if self.is_list:
            self.todo_list.force_write(base_dir / self.name)
        elif self.is_note:
            self._write_note(base_dir)
        self.written = True

    def _write_note(self, base_dir: Path) -> None:
        if not self.note:
            # Never materialize a zero-byte note.
            logger.debug("note_write_skipped", extra={"dependency.name": self.name})
            return
        (base_dir / self.name).write_text(self.note, encoding="utf-8")

    def mark_unwritten(self) -> None:
        """Force the next write to persist this dependency and its subtree."""
        self.written = False
        if self.is_list:
            self.todo_list.mark_subtree_dirty()

    def delete_files(self, base_dir: Path, keep: Collection[str] = ()) -> int:
        """Delete this dependency's file and every file below it.

        Names in ``keep`` are still referenced elsewhere and are skipped.
        Returns the number of files removed.
        """
        if self.is_none:
            return 0
        if self.is_list and not self.written and not self.todo_list.todos:
            # Never loaded; hydrate so nested dependency files are found too.
            self.read(base_dir)

        deleted = 0
        if self.is_list:
            deleted += self.todo_list.delete_dependency_files(base_dir, keep)
        if self.name in keep:
            return deleted
        file_path = base_dir / self.name
        if file_path.is_file():
            file_path.unlink()
            deleted += 1
            logger.debug("dependency_file_deleted", extra={"file.path": str(file_path)})
        return deleted
