"""Locating and reading Taskfiles, their includes and Taskvars files."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, replace

from packaging.version import Version

from .location import Location
from .lookup import current_platform
from .merge import MergeError, merge
from .taskfile import Taskfile
from .variables import Vars
from .yamlnodes import YamlDecodeError, parse

DEFAULT_TASKFILES = (
    "Taskfile.yml",
    "Taskfile.yaml",
    "Taskfile.dist.yml",
    "Taskfile.dist.yaml",
)

INCLUDED_DOTENV_MESSAGE = (
    "task: Included Taskfiles can't have dotenv declarations. "
    "Please, move the dotenv declaration to the main Taskfile"
)

_V3 = Version("3")


class TaskfileReadError(Exception):
    """Raised when a Taskfile cannot be found, parsed or included."""


_READ_ERRORS = (OSError, TaskfileReadError, YamlDecodeError, MergeError)


def _smart_join(base: str, path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.normpath(os.path.join(base, path))


def _parent(path: str) -> str:
    return os.path.dirname(os.path.normpath(path)) or "."


def _try_abs_to_rel(path: str) -> str:
    if not os.path.isabs(path):
        return path
    try:
        return os.path.relpath(path)
    except ValueError:
        return path


def _is_v3(version: Version | None) -> bool:
    return version is not None and version >= _V3


@dataclass(eq=False)
class ReaderNode:
    """One Taskfile being read, linked to the Taskfile that included it."""

    dir: str = ""
    entrypoint: str = ""
    optional: bool = False
    parent: ReaderNode | None = None

    @property
    def path(self) -> str:
        """The Taskfile path this node stands for."""
        return _smart_join(self.dir, self.entrypoint)


def read_taskfile_file(path: str) -> Taskfile:
    """Parse the single Taskfile at ``path`` without following includes."""
    with open(path, "rb") as handle:
        data = handle.read()
    try:
        return Taskfile.from_node(parse(data))
    except YamlDecodeError as exc:
        raise TaskfileReadError(
            f"task: Failed to parse {_try_abs_to_rel(path)}:\n{exc}"
        ) from exc


def find_taskfile(path: str) -> str:
    """Return ``path`` if it is a file, else the default Taskfile inside it."""
    info = os.stat(path)
    if stat.S_ISREG(info.st_mode):
        return path
    for name in DEFAULT_TASKFILES:
        candidate = _smart_join(path, name)
        if os.path.exists(candidate):
            return candidate
    raise TaskfileReadError(
        f'task: No Taskfile found in "{path}". Use "task --init" to create a new one'
    )


def find_taskfile_walk(path: str) -> str:
    """Find a Taskfile at ``path`` or in a parent directory with the same owner."""
    original = path
    owner = os.stat(path).st_uid
    while True:
        try:
            return find_taskfile(path)
        except (OSError, TaskfileReadError):
            pass
        parent = _parent(path)
        parent_owner = os.stat(parent).st_uid
        if path == parent or parent_owner != owner:
            raise TaskfileReadError(
                f'task: No Taskfile found in "{original}" (or any of the parent '
                'directories). Use "task --init" to create a new one'
            )
        owner = parent_owner
        path = parent


def check_circular_includes(node: ReaderNode | None) -> None:
    """Raise if the Taskfile of ``node`` already appears among its ancestors."""
    if node is None:
        raise TaskfileReadError("task: failed to check for include cycle: node was None")
    if node.parent is None:
        raise TaskfileReadError(
            "task: failed to check for include cycle: node has no parent"
        )
    base_path = node.path
    current = node.parent
    while current is not None:
        if current.path == base_path:
            raise TaskfileReadError(
                f"task: include cycle detected between {current.path} "
                f"<--> {node.parent.path}"
            )
        current = current.parent


def read_taskfile(node: ReaderNode) -> tuple[Taskfile, str]:
    """Read the Taskfile of ``node`` with all its includes merged in.

    Returns the Taskfile and the directory it was found in. ``node`` is
    updated with the directory and file name actually read.
    """
    if not node.dir:
        node.dir = os.getcwd()

    path = find_taskfile_walk(_smart_join(node.dir, node.entrypoint))
    node.dir = os.path.dirname(path)
    node.entrypoint = os.path.basename(path)

    taskfile = read_taskfile_file(path)
    includes = taskfile.includes

    if includes is not None:
        for key, included in includes.items():
            if not included.base_dir:
                includes.set(key, replace(included, base_dir=node.dir))

        for namespace, declared in includes.items():
            _include(taskfile, node, namespace, declared.deep_copy())

    location = path
    if not _is_v3(taskfile.version):
        location = _smart_join(node.dir, f"Taskfile_{current_platform()[0]}.yml")
        if os.path.exists(location):
            merge(taskfile, read_taskfile_file(location), None)

    taskfile.location = location
    for task in taskfile.tasks.values():
        if task is None:
            continue
        if task.location is None:
            task.location = Location()
        if not task.location.taskfile:
            task.location.taskfile = location

    return taskfile, node.dir


def _include(taskfile: Taskfile, node: ReaderNode, namespace: str, included) -> None:
    try:
        include_path = find_taskfile(included.full_taskfile_path())
    except (OSError, TaskfileReadError):
        if included.optional:
            return
        raise

    child = ReaderNode(
        dir=os.path.dirname(include_path),
        entrypoint=os.path.basename(include_path),
        optional=included.optional,
        parent=node,
    )
    check_circular_includes(child)

    try:
        included_taskfile, _ = read_taskfile(child)
    except _READ_ERRORS:
        if included.optional:
            return
        raise

    if _is_v3(taskfile.version) and included_taskfile.dotenv:
        raise TaskfileReadError(INCLUDED_DOTENV_MESSAGE)

    if included.advanced_import:
        directory = included.full_dir_path()
        for values in (included_taskfile.vars, included_taskfile.env):
            if values is None:
                continue
            for key, value in values.items():
                values.set(key, replace(value, dir=directory))
        for task in included_taskfile.tasks.values():
            task.dir = _smart_join(directory, task.dir)
            task.include_vars = included.vars
            task.included_taskfile_vars = included_taskfile.vars
            task.included_taskfile = included

    merge(taskfile, included_taskfile, included, namespace)

    if (
        included_taskfile.tasks.get("default") is not None
        and taskfile.tasks.get(namespace) is None
    ):
        default_task = taskfile.tasks[f"{namespace}:default"]
        default_task.aliases = [
            *(default_task.aliases or ()),
            namespace,
            *(included.aliases or ()),
        ]


def _read_vars_file(path: str) -> Vars:
    with open(path, "rb") as handle:
        return Vars.from_node(parse(handle.read()))


def read_taskvars(directory: str) -> Vars:
    """Read ``Taskvars.yml`` and the OS-specific Taskvars file in ``directory``."""
    result = Vars()
    path = _smart_join(directory, "Taskvars.yml")
    if os.path.exists(path):
        result = _read_vars_file(path)

    os_path = _smart_join(directory, f"Taskvars_{current_platform()[0]}.yml")
    if os.path.exists(os_path):
        result.merge(_read_vars_file(os_path))
    return result