"""The top-level Taskfile document."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from fractions import Fraction

from packaging.version import InvalidVersion, Version
from yaml.nodes import MappingNode, Node

from .includes import IncludedTaskfiles
from .output import Output
from .task import Task, parse_tasks
from .variables import Vars
from .yamlnodes import (
    YamlDecodeError,
    decode_bool,
    decode_int,
    decode_str,
    decode_str_list,
    mapping_pairs,
    short_tag,
)

_DURATION_PART = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")

# Values in microseconds.
_DURATION_UNITS = {
    "ns": Fraction(1, 1000),
    "us": Fraction(1),
    "µs": Fraction(1),
    "μs": Fraction(1),
    "ms": Fraction(1000),
    "s": Fraction(1_000_000),
    "m": Fraction(60_000_000),
    "h": Fraction(3_600_000_000),
}


def parse_version(text: str) -> Version:
    """Parse a Taskfile schema version such as ``3`` or ``2.6``."""
    try:
        return Version(text)
    except InvalidVersion as exc:
        raise YamlDecodeError(f"Invalid Semantic Version: {text!r}") from exc


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``500ms``, ``1h30m`` or ``-1.5s``."""
    invalid = YamlDecodeError(f'time: invalid duration "{text}"')
    rest = text
    negative = False
    if rest.startswith(("-", "+")):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise invalid
    total = Fraction(0)
    while rest:
        match = _DURATION_PART.match(rest)
        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            raise invalid
        if not unit:
            raise YamlDecodeError(f'time: missing unit in duration "{text}"')
        if unit not in _DURATION_UNITS:
            raise YamlDecodeError(f'time: unknown unit "{unit}" in duration "{text}"')
        value = Fraction(int(whole or "0"))
        if fraction:
            value += Fraction(int(fraction), 10 ** len(fraction))
        total += value * _DURATION_UNITS[unit]
        rest = rest[match.end():]
    result = timedelta(microseconds=round(total))
    return -result if negative else result


@dataclass
class Taskfile:
    """A parsed Taskfile with its settings, variables, includes and tasks."""

    location: str = ""
    version: Version | None = None
    expansions: int = 2
    output: Output = field(default_factory=Output)
    method: str = ""
    includes: IncludedTaskfiles | None = None
    posix_opts: list[str] | None = None
    bash_opts: list[str] | None = None
    vars: Vars | None = field(default_factory=Vars)
    env: Vars | None = field(default_factory=Vars)
    tasks: dict[str, Task] = field(default_factory=dict)
    silent: bool = False
    dotenv: list[str] | None = None
    run: str = ""
    interval: timedelta = field(default_factory=timedelta)

    @classmethod
    def from_node(cls, node: Node | None) -> Taskfile:
        """Decode a Taskfile document from its root mapping."""
        if not isinstance(node, MappingNode):
            raise YamlDecodeError.at(
                node, f"cannot unmarshal {short_tag(node)} into taskfile"
            )
        fields = dict(mapping_pairs(node))
        version_text = decode_str(fields.get("version"))
        interval_text = decode_str(fields.get("interval"))
        includes_node = fields.get("includes")
        expansions = decode_int(fields.get("expansions"))
        return cls(
            version=parse_version(version_text) if version_text else None,
            expansions=expansions if expansions > 0 else 2,
            output=Output.from_node(fields.get("output")),
            method=decode_str(fields.get("method")),
            includes=None
            if short_tag(includes_node) == "!!null"
            else IncludedTaskfiles.from_node(includes_node),
            posix_opts=decode_str_list(fields.get("set")),
            bash_opts=decode_str_list(fields.get("shopt")),
            vars=Vars.from_node(fields.get("vars")),
            env=Vars.from_node(fields.get("env")),
            tasks=parse_tasks(fields.get("tasks")),
            silent=decode_bool(fields.get("silent")),
            dotenv=decode_str_list(fields.get("dotenv")),
            run=decode_str(fields.get("run")),
            interval=parse_duration(interval_text) if interval_text else timedelta(0),
        )