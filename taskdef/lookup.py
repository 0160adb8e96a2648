"""Finding tasks by name or alias, listing them and platform checks."""

from __future__ import annotations

import difflib
import platform
import sys
from collections.abc import Callable, Iterable

from .location import Call
from .platforms import Platform
from .task import Task
from .taskfile import Taskfile

MAXIMUM_TASK_CALL = 100

_IGNORED_PATH_PARTS = ("/.git", "/.hg", "/.task", "/node_modules")

_OS_PREFIXES = (
    ("linux", "linux"),
    ("darwin", "darwin"),
    ("win32", "windows"),
    ("cygwin", "windows"),
    ("msys", "windows"),
    ("freebsd", "freebsd"),
    ("openbsd", "openbsd"),
    ("netbsd", "netbsd"),
    ("dragonfly", "dragonfly"),
    ("sunos", "solaris"),
    ("aix", "aix"),
    ("android", "android"),
    ("ios", "ios"),
    ("emscripten", "js"),
    ("wasi", "wasip1"),
)

_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "i386": "386",
    "i486": "386",
    "i586": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv5l": "arm",
    "armv6l": "arm",
    "armv7l": "arm",
    "armv7": "arm",
    "arm": "arm",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loong64",
    "mips": "mips",
    "mips64": "mips64",
}


class TaskNotFoundError(LookupError):
    """Raised when no task has the requested name or alias."""

    def __init__(self, task_name: str, did_you_mean: str = "") -> None:
        message = f'task: Task "{task_name}" does not exist'
        if did_you_mean:
            message += f'. Did you mean "{did_you_mean}"?'
        super().__init__(message)
        self.task_name = task_name
        self.did_you_mean = did_you_mean

    def __str__(self) -> str:
        return self.args[0]


class MultipleTasksWithAliasError(LookupError):
    """Raised when an alias is shared by more than one task."""

    def __init__(self, alias_name: str, task_names: list[str]) -> None:
        super().__init__(
            f'task: Multiple tasks ({", ".join(task_names)}) '
            f'with alias "{alias_name}" found'
        )
        self.alias_name = alias_name
        self.task_names = task_names

    def __str__(self) -> str:
        return self.args[0]


def get_task(taskfile: Taskfile, call: Call) -> Task:
    """Return the task named by ``call``, looking at aliases if no name matches."""
    if call.task in taskfile.tasks:
        return taskfile.tasks[call.task]

    matches = [
        task
        for task in taskfile.tasks.values()
        if task is not None and call.task in (task.aliases or ())
    ]
    if len(matches) > 1:
        raise MultipleTasksWithAliasError(call.task, [task.task for task in matches])
    if not matches:
        suggestions = difflib.get_close_matches(call.task, list(taskfile.tasks), n=1)
        raise TaskNotFoundError(call.task, suggestions[0] if suggestions else "")
    return matches[0]


def list_tasks(taskfile: Taskfile, *args: Callable[[Task], bool]) -> list[Task]:
    """Return the tasks no filter in ``args`` rejects, top-level names first."""
    tasks: Iterable[Task] = (
        task
        for task in taskfile.tasks.values()
        if task is not None and not any(reject(task) for reject in args)
    )
    return sorted(tasks, key=lambda task: (":" in task.task, task.task))


def filter_out_no_desc(task: Task) -> bool:
    """Reject tasks without a description."""
    return task.desc == ""


def filter_out_internal(task: Task) -> bool:
    """Reject internal tasks."""
    return task.internal


def current_platform() -> tuple[str, str]:
    """Return the running operating system and architecture names."""
    os_name = sys.platform
    for prefix, name in _OS_PREFIXES:
        if sys.platform.startswith(prefix):
            os_name = name
            break
    machine = platform.machine().lower()
    return os_name, _ARCH_NAMES.get(machine, machine)


def should_run_on_current_platform(platforms: list[Platform | None] | None) -> bool:
    """Return whether any of ``platforms`` matches the running system; none means all."""
    if not platforms:
        return True
    os_name, arch = current_platform()
    return any(p is not None and p.matches(os_name, arch) for p in platforms)


def should_ignore_file(path: str) -> bool:
    """Return whether a watched path lies in a VCS, cache or dependency directory."""
    return any(part in path for part in _IGNORED_PATH_PARTS)