"""Task commands and dependencies."""

from __future__ import annotations

from dataclasses import dataclass

from yaml.nodes import MappingNode, Node, ScalarNode

from .platforms import Platform
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


def _copy_list(items: list | None) -> list | None:
    return None if items is None else list(items)


@dataclass
class Cmd:
    """One command of a task: a shell command or a call to another task."""

    cmd: str = ""
    silent: bool = False
    task: str = ""
    posix_opts: list[str] | None = None
    bash_opts: list[str] | None = None
    vars: Vars | None = None
    ignore_error: bool = False
    defer: bool = False
    platforms: list[Platform | None] | None = None

    @classmethod
    def from_node(cls, node: Node | None) -> Cmd:
        """Decode a command string, a command mapping, a deferral or a task call."""
        if short_tag(node) == "!!null":
            return cls()
        if isinstance(node, ScalarNode):
            return cls(cmd=decode_str(node))
        if not isinstance(node, MappingNode):
            raise YamlDecodeError.at(
                node, f"cannot unmarshal {short_tag(node)} into command"
            )

        fields = dict(mapping_pairs(node))

        try:
            with_options = cls(
                cmd=decode_str(fields.get("cmd")),
                silent=decode_bool(fields.get("silent")),
                posix_opts=decode_str_list(fields.get("set")),
                bash_opts=decode_str_list(fields.get("shopt")),
                ignore_error=decode_bool(fields.get("ignore_error")),
                platforms=decode_list(fields.get("platforms"), Platform.from_node),
            )
        except YamlDecodeError:
            with_options = None
        if with_options is not None and with_options.cmd:
            return with_options

        try:
            deferred_command = decode_str(fields.get("defer"))
        except YamlDecodeError:
            deferred_command = ""
        if deferred_command:
            return cls(cmd=deferred_command, defer=True)

        try:
            call_fields = dict(mapping_pairs(fields.get("defer")))
            deferred_task = decode_str(call_fields.get("task"))
            deferred_vars = _optional_vars(call_fields.get("vars"))
        except YamlDecodeError:
            deferred_task = ""
        if deferred_task:
            return cls(task=deferred_task, vars=deferred_vars, defer=True)

        try:
            task = decode_str(fields.get("task"))
            task_vars = _optional_vars(fields.get("vars"))
        except YamlDecodeError:
            task = ""
        if task:
            return cls(task=task, vars=task_vars)

        raise YamlDecodeError.at(node, "invalid keys in command")

    def deep_copy(self) -> Cmd:
        """Return an independent copy."""
        return Cmd(
            cmd=self.cmd,
            silent=self.silent,
            task=self.task,
            posix_opts=_copy_list(self.posix_opts),
            bash_opts=_copy_list(self.bash_opts),
            vars=None if self.vars is None else self.vars.deep_copy(),
            ignore_error=self.ignore_error,
            defer=self.defer,
            platforms=None
            if self.platforms is None
            else [None if p is None else p.deep_copy() for p in self.platforms],
        )


@dataclass
class Dep:
    """A task dependency, with optional variables."""

    task: str = ""
    vars: Vars | None = None

    @classmethod
    def from_node(cls, node: Node | None) -> Dep:
        """Decode a task name or a mapping with ``task`` and ``vars``."""
        if short_tag(node) == "!!null":
            return cls()
        if isinstance(node, ScalarNode):
            return cls(task=decode_str(node))
        if isinstance(node, MappingNode):
            fields = dict(mapping_pairs(node))
            return cls(
                task=decode_str(fields.get("task")),
                vars=_optional_vars(fields.get("vars")),
            )
        raise YamlDecodeError(f"cannot unmarshal {short_tag(node)} into dependency")

    def deep_copy(self) -> Dep:
        """Return an independent copy."""
        return Dep(
            task=self.task,
            vars=None if self.vars is None else self.vars.deep_copy(),
        )