"""Task locations and task calls."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .variables import Vars


@dataclass
class Location:
    """Where a task is defined: line, column and Taskfile path."""

    line: int = 0
    column: int = 0
    taskfile: str = ""

    def deep_copy(self) -> Location:
        """Return an independent copy."""
        return replace(self)


@dataclass
class Call:
    """A request to run a task, with optional variables."""

    task: str
    vars: Vars | None = None