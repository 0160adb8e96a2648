"""Ordered variable maps used by tasks, calls and environments."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Any

from yaml.nodes import MappingNode, Node, ScalarNode

from .yamlnodes import YamlDecodeError, decode_str, mapping_pairs, short_tag


@dataclass(frozen=True)
class Var:
    """A variable: a static string, a live value, or a shell command to run."""

    static: str = ""
    live: Any = None
    sh: str = ""
    dir: str = ""

    @classmethod
    def from_node(cls, node: Node | None) -> Var:
        """Decode a scalar (static value) or a mapping with an ``sh`` key."""
        if short_tag(node) == "!!null":
            return cls()
        if isinstance(node, ScalarNode):
            return cls(static=decode_str(node))
        if isinstance(node, MappingNode):
            fields = dict(mapping_pairs(node))
            return cls(sh=decode_str(fields.get("sh")))
        raise YamlDecodeError.at(
            node, f"cannot unmarshal {short_tag(node)} into variable"
        )


class Vars:
    """A string-keyed map of variables that remembers insertion order."""

    __slots__ = ("_mapping",)

    def __init__(
        self, values: Mapping[str, Var] | Iterable[tuple[str, Var]] | None = None
    ) -> None:
        self._mapping: dict[str, Var] = {}
        if values is not None:
            pairs = values.items() if isinstance(values, Mapping) else values
            for key, value in pairs:
                self.set(key, value)

    @classmethod
    def from_node(cls, node: Node | None) -> Vars:
        """Decode a YAML mapping of variable names to variables."""
        if short_tag(node) == "!!null":
            return cls()
        if not isinstance(node, MappingNode):
            raise YamlDecodeError.at(
                node, f"cannot unmarshal {short_tag(node)} into variables"
            )
        result = cls()
        for key, value in mapping_pairs(node):
            result.set(key, Var.from_node(value))
        return result

    def set(self, key: str, value: Var) -> None:
        """Set ``key``; an existing key keeps its position."""
        self._mapping[key] = value

    def get(self, key: str) -> Var | None:
        """Return the variable for ``key``, or ``None``."""
        return self._mapping.get(key)

    def merge(self, other: Vars | None) -> None:
        """Copy every entry of ``other`` into this map, in its order."""
        if other is None:
            return
        for key, value in other.items():
            self.set(key, value)

    def items(self) -> list[tuple[str, Var]]:
        """Return a snapshot of the entries in order."""
        return list(self._mapping.items())

    def keys(self) -> list[str]:
        """Return the keys in order."""
        return list(self._mapping)

    def to_cache_map(self) -> dict[str, Any]:
        """Return resolved values only; unresolved shell variables are left out."""
        result: dict[str, Any] = {}
        for key, value in self._mapping.items():
            if value.sh:
                continue
            result[key] = value.live if value.live is not None else value.static
        return result

    def deep_copy(self) -> Vars:
        """Return an independent copy."""
        return Vars((key, replace(value)) for key, value in self._mapping.items())

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, key: object) -> bool:
        return key in self._mapping

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vars):
            return NotImplemented
        return self.items() == other.items()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Vars({self._mapping!r})"