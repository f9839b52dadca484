"""Todo store error types."""


class TodoError(Exception):
    """Base class for todo store errors."""


class ParseFailedError(TodoError, ValueError):
    """A line does not match the todo item grammar."""

    def __init__(self, line: str) -> None:
        super().__init__(f"could not parse todo line: {line!r}")
        self.line = line


class DependencyAlreadyExistsError(TodoError):
    """The item already owns a note or a nested list."""


class NoteEmptyError(TodoError, ValueError):
    """Attempted to save a note with no content."""


class PathError(TodoError, IndexError):
    """A tree path does not address a nested list."""
