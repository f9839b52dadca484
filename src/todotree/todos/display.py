"""Display options for rendering lists as text."""

from __future__ import annotations

from dataclasses import dataclass

from todotree.todos.restrictions import Restriction, no_restriction, undone_only


@dataclass(frozen=True)
class DisplayOptions:
    show_done: bool = False
    done_string: str = "[x] "
    undone_string: str = "[ ] "

    def prefix(self, done: bool) -> str:
        return self.done_string if done else self.undone_string

    def restriction(self) -> Restriction:
        return no_restriction if self.show_done else undone_only
