"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from todotree.config.paths import get_default_todo_path
from todotree.todos.display import DisplayOptions


class DisplayConfig(BaseModel):
    """How lists are printed."""

    show_done: bool = False
    done_string: str = "[x] "
    undone_string: str = "[ ] "

    def to_options(self) -> DisplayOptions:
        return DisplayOptions(
            show_done=self.show_done,
            done_string=self.done_string,
            undone_string=self.undone_string,
        )


class ConfigError(Exception):
    """Configuration error."""

    pass


class TodoTreeConfig(BaseModel):
    """Root configuration model."""

    todo_path: Path = Field(default_factory=get_default_todo_path)
    # Read and write notes and nested lists.
    tree: bool = True
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None

    @field_validator("todo_path")
    @classmethod
    def _expand_todo_path(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
