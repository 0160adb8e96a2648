"""Included Taskfiles and their ordered collection."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from yaml.nodes import MappingNode, Node, ScalarNode

from .variables import Vars
from .yamlnodes import (
    YamlDecodeError,
    decode_bool,
    decode_str,
    decode_str_list,
    mapping_pairs,
    short_tag,
)

_ENV_REFERENCE = re.compile(r"\$(?:\{([A-Za-z_][A-Za-z0-9_]*)\}|([A-Za-z_][A-Za-z0-9_]*))")


def _expand(path: str) -> str:
    expanded = _ENV_REFERENCE.sub(
        lambda m: os.environ.get(m.group(1) or m.group(2), ""), path
    )
    return os.path.expanduser(expanded)


def _smart_join(base: str, path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(base, path)


@dataclass
class IncludedTaskfile:
    """A Taskfile included by another, with its options."""

    taskfile: str = ""
    dir: str = ""
    optional: bool = False
    internal: bool = False
    aliases: list[str] | None = None
    advanced_import: bool = False
    vars: Vars | None = None
    base_dir: str = ""

    @classmethod
    def from_node(cls, node: Node | None) -> IncludedTaskfile:
        """Decode a path string or a mapping of include options."""
        if short_tag(node) == "!!null":
            return cls()
        if isinstance(node, ScalarNode):
            return cls(taskfile=decode_str(node))
        if isinstance(node, MappingNode):
            fields = dict(mapping_pairs(node))
            vars_node = fields.get("vars")
            return cls(
                taskfile=decode_str(fields.get("taskfile")),
                dir=decode_str(fields.get("dir")),
                optional=decode_bool(fields.get("optional")),
                internal=decode_bool(fields.get("internal")),
                aliases=decode_str_list(fields.get("aliases")),
                advanced_import=True,
                vars=None if short_tag(vars_node) == "!!null" else Vars.from_node(vars_node),
            )
        raise YamlDecodeError.at(
            node, f"cannot unmarshal {short_tag(node)} into included taskfile"
        )

    def deep_copy(self) -> IncludedTaskfile:
        """Return an independent copy."""
        return IncludedTaskfile(
            taskfile=self.taskfile,
            dir=self.dir,
            optional=self.optional,
            internal=self.internal,
            aliases=None if self.aliases is None else list(self.aliases),
            advanced_import=self.advanced_import,
            vars=None if self.vars is None else self.vars.deep_copy(),
            base_dir=self.base_dir,
        )

    def full_taskfile_path(self) -> str:
        """Return the absolute path of the included Taskfile."""
        return self._resolve(self.taskfile)

    def full_dir_path(self) -> str:
        """Return the absolute path of the included Taskfile's working directory."""
        return self._resolve(self.dir)

    def _resolve(self, path: str) -> str:
        path = _expand(path)
        if os.path.isabs(path):
            return path
        return os.path.abspath(_smart_join(self.base_dir, path))


class IncludedTaskfiles:
    """Included Taskfiles keyed by namespace, in declaration order."""

    __slots__ = ("_mapping",)

    def __init__(self) -> None:
        self._mapping: dict[str, IncludedTaskfile] = {}

    @classmethod
    def from_node(cls, node: Node | None) -> IncludedTaskfiles:
        """Decode a mapping of namespaces to includes."""
        result = cls()
        if short_tag(node) == "!!null":
            return result
        if not isinstance(node, MappingNode):
            raise YamlDecodeError.at(
                node, f"cannot unmarshal {short_tag(node)} into included taskfiles"
            )
        for key, value in mapping_pairs(node):
            result.set(key, IncludedTaskfile.from_node(value))
        return result

    def set(self, key: str, included: IncludedTaskfile) -> None:
        """Set the include for ``key``; an existing key keeps its position."""
        self._mapping[key] = included

    def get(self, key: str) -> IncludedTaskfile | None:
        """Return the include for ``key``, or ``None``."""
        return self._mapping.get(key)

    def items(self) -> list[tuple[str, IncludedTaskfile]]:
        """Return a snapshot of the entries in order."""
        return list(self._mapping.items())

    def keys(self) -> list[str]:
        """Return the namespaces in order."""
        return list(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, key: object) -> bool:
        return key in self._mapping

    def __repr__(self) -> str:
        return f"IncludedTaskfiles({self._mapping!r})"