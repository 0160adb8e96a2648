"""Output style settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from yaml.nodes import MappingNode, Node, ScalarNode

from .yamlnodes import (
    YamlDecodeError,
    decode_bool,
    decode_str,
    mapping_pairs,
    short_tag,
)


@dataclass
class OutputGroup:
    """Options of the ``group`` output style."""

    begin: str = ""
    end: str = ""
    error_only: bool = False

    @classmethod
    def from_node(cls, node: Node | None) -> OutputGroup:
        """Decode a mapping with ``begin``, ``end`` and ``error_only``."""
        if short_tag(node) == "!!null":
            return cls()
        if not isinstance(node, MappingNode):
            raise YamlDecodeError.for_node(node, "output group")
        fields = dict(mapping_pairs(node))
        return cls(
            begin=decode_str(fields.get("begin")),
            end=decode_str(fields.get("end")),
            error_only=decode_bool(fields.get("error_only")),
        )

    def is_set(self) -> bool:
        """Return whether a custom begin or end template is set."""
        return bool(self.begin or self.end)


@dataclass
class Output:
    """The output style name and its group options."""

    name: str = ""
    group: OutputGroup = field(default_factory=OutputGroup)

    @classmethod
    def from_node(cls, node: Node | None) -> Output:
        """Decode a style name or a mapping holding a ``group`` key."""
        if short_tag(node) == "!!null":
            return cls()
        if isinstance(node, ScalarNode):
            return cls(name=decode_str(node))
        if isinstance(node, MappingNode):
            try:
                group_node = dict(mapping_pairs(node)).get("group")
                group = (
                    None
                    if short_tag(group_node) == "!!null"
                    else OutputGroup.from_node(group_node)
                )
            except YamlDecodeError as exc:
                raise YamlDecodeError(
                    "task: output style must be a string or mapping with a "
                    f'"group" key: {exc}'
                ) from exc
            if group is None:
                raise YamlDecodeError(
                    'task: output style must have the "group" key when in mapping form'
                )
            return cls(name="group", group=group)
        raise YamlDecodeError.at(
            node, f"cannot unmarshal {short_tag(node)} into output"
        )

    def is_set(self) -> bool:
        """Return whether a custom output style is set."""
        return bool(self.name)