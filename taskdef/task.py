"""Task definitions and the map of tasks in a Taskfile."""

from __future__ import annotations

from dataclasses import dataclass

from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from .commands import Cmd, Dep
from .includes import IncludedTaskfile
from .location import Location
from .platforms import Platform
from .precondition import Precondition
from .variables import Vars
from .yamlnodes import (
    YamlDecodeError,
    decode_bool,
    decode_list,
    decode_str,
    decode_str_list,
    mapping_pairs,
    short_tag,
)


def _optional_vars(node: Node | None) -> Vars | None:
    return None if short_tag(node) == "!!null" else Vars.from_node(node)


def _copy_strs(items: list[str] | None) -> list[str] | None:
    return None if items is None else list(items)


def _copy_items(items: list | None) -> list | None:
    if items is None:
        return None
    return [None if item is None else item.deep_copy() for item in items]


def _copy_vars(values: Vars | None) -> Vars | None:
    return None if values is None else values.deep_copy()


@dataclass
class Task:
    """A named task: its commands, dependencies and settings."""

    task: str = ""
    cmds: list[Cmd | None] | None = None
    deps: list[Dep | None] | None = None
    label: str = ""
    desc: str = ""
    summary: str = ""
    aliases: list[str] | None = None
    sources: list[str] | None = None
    generates: list[str] | None = None
    status: list[str] | None = None
    preconditions: list[Precondition | None] | None = None
    dir: str = ""
    posix_opts: list[str] | None = None
    bash_opts: list[str] | None = None
    vars: Vars | None = None
    env: Vars | None = None
    dotenv: list[str] | None = None
    silent: bool = False
    interactive: bool = False
    internal: bool = False
    method: str = ""
    prefix: str = ""
    ignore_error: bool = False
    run: str = ""
    include_vars: Vars | None = None
    included_taskfile_vars: Vars | None = None
    included_taskfile: IncludedTaskfile | None = None
    platforms: list[Platform | None] | None = None
    location: Location | None = None

    def name(self) -> str:
        """Return the label if set, otherwise the task name."""
        return self.label or self.task

    @classmethod
    def from_node(cls, node: Node | None) -> Task:
        """Decode a single command, a list of commands or a full task mapping."""
        if short_tag(node) == "!!null":
            return cls()
        if isinstance(node, ScalarNode):
            return cls(cmds=[Cmd.from_node(node)])
        if isinstance(node, SequenceNode):
            return cls(cmds=decode_list(node, Cmd.from_node))
        if isinstance(node, MappingNode):
            fields = dict(mapping_pairs(node))
            return cls(
                cmds=decode_list(fields.get("cmds"), Cmd.from_node),
                deps=decode_list(fields.get("deps"), Dep.from_node),
                label=decode_str(fields.get("label")),
                desc=decode_str(fields.get("desc")),
                summary=decode_str(fields.get("summary")),
                aliases=decode_str_list(fields.get("aliases")),
                sources=decode_str_list(fields.get("sources")),
                generates=decode_str_list(fields.get("generates")),
                status=decode_str_list(fields.get("status")),
                preconditions=decode_list(
                    fields.get("preconditions"), Precondition.from_node
                ),
                dir=decode_str(fields.get("dir")),
                posix_opts=decode_str_list(fields.get("set")),
                bash_opts=decode_str_list(fields.get("shopt")),
                vars=_optional_vars(fields.get("vars")),
                env=_optional_vars(fields.get("env")),
                dotenv=decode_str_list(fields.get("dotenv")),
                silent=decode_bool(fields.get("silent")),
                interactive=decode_bool(fields.get("interactive")),
                internal=decode_bool(fields.get("internal")),
                method=decode_str(fields.get("method")),
                prefix=decode_str(fields.get("prefix")),
                ignore_error=decode_bool(fields.get("ignore_error")),
                run=decode_str(fields.get("run")),
                platforms=decode_list(fields.get("platforms"), Platform.from_node),
            )
        raise YamlDecodeError.at(node, f"cannot unmarshal {short_tag(node)} into task")

    def deep_copy(self) -> Task:
        """Return an independent copy."""
        return Task(
            task=self.task,
            cmds=_copy_items(self.cmds),
            deps=_copy_items(self.deps),
            label=self.label,
            desc=self.desc,
            summary=self.summary,
            aliases=_copy_strs(self.aliases),
            sources=_copy_strs(self.sources),
            generates=_copy_strs(self.generates),
            status=_copy_strs(self.status),
            preconditions=_copy_items(self.preconditions),
            dir=self.dir,
            posix_opts=_copy_strs(self.posix_opts),
            bash_opts=_copy_strs(self.bash_opts),
            vars=_copy_vars(self.vars),
            env=_copy_vars(self.env),
            dotenv=_copy_strs(self.dotenv),
            silent=self.silent,
            interactive=self.interactive,
            internal=self.internal,
            method=self.method,
            prefix=self.prefix,
            ignore_error=self.ignore_error,
            run=self.run,
            include_vars=_copy_vars(self.include_vars),
            included_taskfile_vars=_copy_vars(self.included_taskfile_vars),
            included_taskfile=None
            if self.included_taskfile is None
            else self.included_taskfile.deep_copy(),
            platforms=_copy_items(self.platforms),
            location=None if self.location is None else self.location.deep_copy(),
        )


def parse_tasks(node: Node | None) -> dict[str, Task]:
    """Decode the ``tasks`` mapping, naming each task and recording its location."""
    if short_tag(node) == "!!null":
        return {}
    if not isinstance(node, MappingNode):
        raise YamlDecodeError.at(node, f"cannot unmarshal {short_tag(node)} into tasks")
    tasks: dict[str, Task] = {}
    for key_node, value_node in node.value:
        name = key_node.value if isinstance(key_node, ScalarNode) else ""
        if name in tasks:
            raise YamlDecodeError.at(key_node, f'mapping key "{name}" already defined')
        task = Task.from_node(value_node)
        task.task = name
        task.location = Location(
            line=key_node.start_mark.line + 1,
            column=key_node.start_mark.column + 1,
        )
        tasks[name] = task
    return tasks