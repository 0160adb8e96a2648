"""Merging included Taskfiles into the Taskfile that includes them."""

from __future__ import annotations

from packaging.version import Version

from .includes import IncludedTaskfile
from .taskfile import Taskfile
from .variables import Vars

NAMESPACE_SEPARATOR = ":"


class MergeError(ValueError):
    """Raised when two Taskfiles cannot be merged."""


def _format_version(version: Version | None) -> str:
    if version is None:
        return ""
    return f"{version.major}.{version.minor}.{version.micro}"


def task_name_with_namespace(task_name: str, *args: str) -> str:
    """Prefix ``task_name`` with the namespaces in ``args``.

    A name starting with the separator refers to the root and loses that
    leading separator instead.
    """
    if task_name.startswith(NAMESPACE_SEPARATOR):
        return task_name[len(NAMESPACE_SEPARATOR):]
    return NAMESPACE_SEPARATOR.join([*args, task_name])


def merge(
    first: Taskfile,
    second: Taskfile,
    included_taskfile: IncludedTaskfile | None,
    *args: str,
) -> None:
    """Merge ``second`` into ``first``, placing its tasks under the namespaces in ``args``."""
    if first.version != second.version:
        raise MergeError(
            "task: Taskfiles versions should match. "
            f'First is "{_format_version(first.version)}" '
            f'but second is "{_format_version(second.version)}"'
        )

    if second.expansions not in (0, 2):
        first.expansions = second.expansions
    if second.output.is_set():
        first.output = second.output

    if first.vars is None:
        first.vars = Vars()
    if first.env is None:
        first.env = Vars()
    first.vars.merge(second.vars)
    first.env.merge(second.env)

    if first.tasks is None:
        first.tasks = {}

    for key, original in second.tasks.items():
        task = original.deep_copy()
        task.internal = task.internal or (
            included_taskfile is not None and included_taskfile.internal
        )

        for dep in task.deps or ():
            if dep is not None:
                dep.task = task_name_with_namespace(dep.task, *args)
        for cmd in task.cmds or ():
            if cmd is not None and cmd.task:
                cmd.task = task_name_with_namespace(cmd.task, *args)
        if task.aliases is not None:
            task.aliases = [task_name_with_namespace(a, *args) for a in task.aliases]

        if included_taskfile is not None:
            for namespace_alias in included_taskfile.aliases or ():
                if task.aliases is None:
                    task.aliases = []
                task.aliases.append(task_name_with_namespace(task.task, namespace_alias))
                task.aliases.extend(
                    task_name_with_namespace(alias, namespace_alias)
                    for alias in original.aliases or ()
                )

        name = task_name_with_namespace(key, *args)
        task.task = name
        first.tasks[name] = task