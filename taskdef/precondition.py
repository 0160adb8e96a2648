"""Preconditions that must hold before a task runs."""

from __future__ import annotations

from dataclasses import dataclass, replace

from yaml.nodes import MappingNode, Node, ScalarNode

from .yamlnodes import YamlDecodeError, decode_str, mapping_pairs, short_tag


@dataclass
class Precondition:
    """A shell check and the message shown when it fails."""

    sh: str = ""
    msg: str = ""

    @classmethod
    def from_node(cls, node: Node | None) -> Precondition:
        """Decode a command string or a mapping with ``sh`` and ``msg``."""
        if short_tag(node) == "!!null":
            return cls()
        if isinstance(node, ScalarNode):
            command = decode_str(node)
            return cls(sh=command, msg=f"`{command}` failed")
        if isinstance(node, MappingNode):
            fields = dict(mapping_pairs(node))
            command = decode_str(fields.get("sh"))
            message = decode_str(fields.get("msg")) or f"{command} failed"
            return cls(sh=command, msg=message)
        raise YamlDecodeError.at(
            node, f"cannot unmarshal {short_tag(node)} into precondition"
        )

    def deep_copy(self) -> Precondition:
        """Return an independent copy."""
        return replace(self)