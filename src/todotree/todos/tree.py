"""Path-addressed access to a tree of todo lists.

A ``TreePath`` is a tuple of absolute indices. ``()`` is the root list,
``(2,)`` is the nested list owned by the third root item, ``(2, 0)`` the list
owned by the first item of that one, and so on. Lists never hold references
to their parents; the path is the only link between levels.

All dependency files of the whole tree live in one directory next to the
root file (``notes``).
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import NamedTuple

from todotree.todos.display import DisplayOptions
from todotree.todos.errors import PathError
from todotree.todos.item import PRIORITY_SENTINEL, Todo
from todotree.todos.restrictions import (
    Restriction,
    all_of,
    no_restriction,
    query_restriction,
    undone_only,
)
from todotree.todos.todo_list import TodoList

logger = logging.getLogger(__name__)

NOTES_DIR_NAME = "notes"

TreePath = tuple[int, ...]


def notes_dir_for(todo_path: Path) -> Path:
    return todo_path.parent / NOTES_DIR_NAME


class TreePosition(NamedTuple):
    path: TreePath
    index: int


class SearchHit(NamedTuple):
    path: TreePath
    indices: list[int]


@dataclass
class TodoTree:
    """The root list of a todo file plus everything below it."""

    root: TodoList
    todo_path: Path
    notes_dir: Path
    # When false, dependencies are neither read nor written.
    tree: bool = True
    today: date | None = None
    # Removed items whose dependency files are deleted on the next write.
    pending_removal: list[Todo] = field(default_factory=list)
    last_removed: Todo | None = None

    @classmethod
    def open(
        cls,
        todo_path: Path,
        *,
        read_dependencies: bool = True,
        notes_dir: Path | None = None,
        today: date | None = None,
    ) -> TodoTree:
        notes_dir = notes_dir or notes_dir_for(todo_path)
        root = TodoList.read(todo_path, today=today)
        if read_dependencies:
            root.read_dependencies(notes_dir, today=today)
        logger.debug(
            "todo_tree_opened",
            extra={"file.path": str(todo_path), "count": len(root)},
        )
        return cls(
            root=root,
            todo_path=todo_path,
            notes_dir=notes_dir,
            tree=read_dependencies,
            today=today,
        )

    def reload(self) -> None:
        """Discard in-memory state and read everything again."""
        fresh = self.open(
            self.todo_path,
            read_dependencies=self.tree,
            notes_dir=self.notes_dir,
            today=self.today,
        )
        self.root = fresh.root
        self.pending_removal.clear()
        self.last_removed = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def list_at(self, path: TreePath = ()) -> TodoList:
        """Return the list addressed by ``path``.

        Raises:
            PathError: If a step is out of range or its item has no nested list.
        """
        todo_list = self.root
        for depth, index in enumerate(path):
            if not self.tree:
                raise PathError("nested lists are not loaded")
            if not 0 <= index < len(todo_list):
                raise PathError(f"no todo at {path[: depth + 1]}")
            nested = todo_list[index].nested
            if nested is None:
                raise PathError(f"todo at {path[: depth + 1]} has no nested list")
            todo_list = nested
        return todo_list

    def item_at(
        self,
        path: TreePath,
        index: int,
        restriction: Restriction = no_restriction,
    ) -> Todo:
        todo_list = self.list_at(path)
        return todo_list[todo_list.true_position(index, restriction)]

    def note_at(
        self,
        path: TreePath,
        index: int,
        restriction: Restriction = no_restriction,
    ) -> str | None:
        self._require_tree()
        return self.item_at(path, index, restriction).note

    def parent_of(self, path: TreePath) -> Todo | None:
        """The item owning the list at ``path``; ``None`` for the root."""
        if not path:
            return None
        return self.list_at(path[:-1])[path[-1]]

    def _require_tree(self) -> None:
        # Without tree mode dependency files are neither read nor written.
        if not self.tree:
            raise PathError("notes and nested lists are not loaded")

    def walk(self) -> Iterator[tuple[TreePath, TodoList]]:
        """Breadth-first over every loaded list, root first."""
        queue: deque[tuple[TreePath, TodoList]] = deque([((), self.root)])
        while queue:
            path, todo_list = queue.popleft()
            yield path, todo_list
            for index, todo in enumerate(todo_list):
                nested = todo.nested
                if nested is not None:
                    queue.append(((*path, index), nested))

    # ------------------------------------------------------------------
    # Insertion and removal
    # ------------------------------------------------------------------

    def append(
        self, path: TreePath, message: str, priority: int = PRIORITY_SENTINEL
    ) -> int:
        """Add a todo and move it into place. Returns its index."""
        todo_list = self.list_at(path)
        todo_list.push(Todo(message, priority))
        return todo_list.reorder_last()

    def prepend(self, path: TreePath, message: str, priority: int = 1) -> int:
        todo_list = self.list_at(path)
        todo_list.prepend(Todo(message, priority))
        return todo_list.reorder(0)

    def remove(
        self,
        path: TreePath,
        index: int,
        restriction: Restriction = no_restriction,
    ) -> Todo:
        """Remove a todo; its dependency files go away on the next write."""
        todo = self.list_at(path).remove(index, restriction)
        self.pending_removal.append(todo)
        self.last_removed = todo
        return todo

    def paste(self, path: TreePath) -> int | None:
        """Insert a copy of the last removed todo. Returns its index."""
        if self.last_removed is None:
            return None
        todo = copy.deepcopy(self.last_removed)
        todo.removed_dependencies.clear()
        # The removed todo's files may be deleted before this copy is written.
        todo.dependency.mark_unwritten()
        todo_list = self.list_at(path)
        todo_list.push(todo)
        return todo_list.reorder_last()

    def append_file(self, path: TreePath, other_todo_path: Path) -> int:
        """Merge the todos of another file into a list. Returns how many."""
        other = TodoList.read(other_todo_path, today=self.today)
        if self.tree:
            other.read_dependencies(notes_dir_for(other_todo_path), today=self.today)
        # Dependencies came from another directory; write them all here.
        other.mark_subtree_dirty()
        todo_list = self.list_at(path)
        todo_list.append_list(other)
        todo_list.sort()
        return len(other)

    # ------------------------------------------------------------------
    # Item mutation
    # ------------------------------------------------------------------

    def toggle_done(
        self,
        path: TreePath,
        index: int,
        restriction: Restriction = no_restriction,
    ) -> TreePosition:
        """Toggle a todo and propagate completion to parent todos.

        When the toggle leaves a nested list with no undone todos, the item
        owning that list is marked done too, level by level, until a list
        with undone todos, an already done parent, or the root is reached.
        Returns the list path where propagation stopped and the position of
        the last todo changed in it.
        """
        todo_list = self.list_at(path)
        position = todo_list.true_position(index, restriction)
        todo_list[position].toggle_done(self.today)
        todo_list.mark_dirty()
        position = todo_list.reorder(position)
        return self._ascend(TreePosition(path, position))

    def _ascend(self, current: TreePosition) -> TreePosition:
        path, position = current
        while path and self.list_at(path).is_empty(undone_only):
            parent_path, parent_index = path[:-1], path[-1]
            parent_list = self.list_at(parent_path)
            parent = parent_list[parent_index]
            if parent.done:
                break
            parent.set_done(True, self.today)
            parent_list.mark_dirty()
            position = parent_list.reorder(parent_index)
            path = parent_path
            logger.debug("todo_ascended", extra={"tree.path": list(path)})
        return TreePosition(path, position)

    def complete_matching(
        self, path: TreePath, query: str, restriction: Restriction = undone_only
    ) -> int:
        """Mark every todo matching ``query`` done. Returns how many."""
        todo_list = self.list_at(path)
        matches = list(todo_list.iter(all_of(restriction, query_restriction(query))))
        if not query or not matches:
            return 0
        for todo in matches:
            todo.set_done(True, self.today)
        todo_list.fix_undone()
        todo_list.sort()
        if path:
            self._ascend(TreePosition(path, 0))
        return len(matches)

    def set_priority(
        self,
        path: TreePath,
        index: int,
        priority: int,
        restriction: Restriction = no_restriction,
    ) -> int:
        todo_list = self.list_at(path)
        position = todo_list.true_position(index, restriction)
        todo_list[position].set_priority(priority)
        todo_list.mark_dirty()
        return todo_list.reorder(position)

    def increase_priority(
        self,
        path: TreePath,
        index: int,
        restriction: Restriction = no_restriction,
    ) -> int:
        todo_list = self.list_at(path)
        position = todo_list.true_position(index, restriction)
        todo_list[position].increase_priority()
        todo_list.mark_dirty()
        return todo_list.reorder(position)

    def decrease_priority(
        self,
        path: TreePath,
        index: int,
        restriction: Restriction = no_restriction,
    ) -> int:
        todo_list = self.list_at(path)
        position = todo_list.true_position(index, restriction)
        todo_list[position].decrease_priority()
        todo_list.mark_dirty()
        return todo_list.reorder(position)

    def attach_list(
        self,
        path: TreePath,
        index: int,
        restriction: Restriction = no_restriction,
    ) -> TreePath:
        """Give a todo an empty nested list. Returns the new list's path."""
        self._require_tree()
        todo_list = self.list_at(path)
        position = todo_list.true_position(index, restriction)
        todo_list[position].attach_list()
        todo_list.mark_dirty()
        return (*path, position)

    def attach_note(
        self,
        path: TreePath,
        index: int,
        text: str,
        restriction: Restriction = no_restriction,
    ) -> None:
        self._require_tree()
        todo_list = self.list_at(path)
        todo_list[todo_list.true_position(index, restriction)].attach_note(text)
        todo_list.mark_dirty()

    def detach(
        self,
        path: TreePath,
        index: int,
        restriction: Restriction = no_restriction,
    ) -> bool:
        """Drop a todo's note or nested list. Returns whether one existed."""
        self._require_tree()
        todo_list = self.list_at(path)
        detached = todo_list[todo_list.true_position(index, restriction)].detach()
        if detached is None:
            return False
        todo_list.mark_dirty()
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(
        self,
        path: TreePath,
        query: str,
        restriction: Restriction = no_restriction,
    ) -> list[int]:
        return self.list_at(path).search(query, restriction)

    def search_tree(
        self, query: str, restriction: Restriction = no_restriction
    ) -> list[SearchHit]:
        hits = []
        for path, todo_list in self.walk():
            indices = todo_list.search(query, restriction)
            if indices:
                hits.append(SearchHit(path, indices))
        return hits

    def display(
        self,
        path: TreePath = (),
        options: DisplayOptions | None = None,
        restriction: Restriction | None = None,
    ) -> list[str]:
        return self.list_at(path).display(options, restriction, self.today)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        if self.pending_removal:
            return True
        for _, todo_list in self.walk():
            if todo_list.dirty:
                return True
            if any(todo.removed_dependencies for todo in todo_list):
                return True
        return False

    def write(self) -> bool:
        """Write changed lists and delete files nothing references anymore.

        Returns whether the root file was rewritten. An ``OSError`` while
        writing the root leaves it dirty and skips the cleanup.
        """
        self.notes_dir.mkdir(parents=True, exist_ok=True)
        written = self.root.write(self.todo_path)
        if self.tree:
            self.root.write_dependencies(self.notes_dir)
        deleted = self._delete_orphans()
        logger.info(
            "todo_tree_written",
            extra={
                "file.path": str(self.todo_path),
                "written": written,
                "deleted": deleted,
            },
        )
        return written

    def force_write(self) -> None:
        """Rewrite every list and note regardless of dirty state."""
        self.notes_dir.mkdir(parents=True, exist_ok=True)
        self.root.force_write(self.todo_path)
        if self.tree:
            self.root.force_write_dependencies(self.notes_dir)
        for _, todo_list in self.walk():
            todo_list.mark_clean()
        self._delete_orphans()

    def _delete_orphans(self) -> int:
        keep = self.root.referenced_names()
        deleted = 0
        for todo in self.pending_removal:
            deleted += todo.delete_dependency_files(self.notes_dir, keep)
        self.pending_removal.clear()
        deleted += self.root.delete_removed_dependency_files(self.notes_dir, keep)
        return deleted

    def export(self, target: Path, path: TreePath = ()) -> None:
        """Write a copy of one list and its dependencies to another file.

        The tree's own dirty and written flags are left untouched.
        """
        exported = copy.deepcopy(self.list_at(path))
        notes_dir = notes_dir_for(target)
        notes_dir.mkdir(parents=True, exist_ok=True)
        exported.force_write(target)
        if self.tree:
            exported.force_write_dependencies(notes_dir)
        logger.info(
            "todo_list_exported",
            extra={"file.path": str(target), "count": len(exported)},
        )
