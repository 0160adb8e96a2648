"""Helpers for decoding composed YAML node trees into plain values."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

T = TypeVar("T")

_STANDARD_PREFIX = "tag:yaml.org,2002:"

_TRUE_WORDS = frozenset(
    {"true", "True", "TRUE", "yes", "Yes", "YES", "on", "On", "ON", "y", "Y"}
)
_FALSE_WORDS = frozenset(
    {"false", "False", "FALSE", "no", "No", "NO", "off", "Off", "OFF", "n", "N"}
)


class YamlDecodeError(ValueError):
    """Raised when a YAML document cannot be decoded into the expected shape."""

    @classmethod
    def at(cls, node: Node | None, message: str) -> YamlDecodeError:
        """Build an error whose message is prefixed with the node's line."""
        line = node.start_mark.line + 1 if node is not None and node.start_mark else 0
        return cls(f"yaml: line {line}: {message}")

    @classmethod
    def for_node(cls, node: Node | None, target: str) -> YamlDecodeError:
        """Build the error for a node that cannot become ``target``."""
        tag = short_tag(node)
        detail = f"{tag} `{node.value}`" if isinstance(node, ScalarNode) else tag
        return cls.at(node, f"cannot unmarshal {detail} into {target}")


def parse(text: str | bytes) -> Node | None:
    """Compose the first document of ``text``; ``None`` for an empty stream."""
    try:
        return next(yaml.compose_all(text, Loader=yaml.SafeLoader), None)
    except yaml.YAMLError as exc:
        raise YamlDecodeError(f"yaml: {exc}") from exc


def short_tag(node: Node | None) -> str:
    """Return the node's tag in ``!!name`` form; a missing node is ``!!null``."""
    if node is None:
        return "!!null"
    tag = node.tag or ""
    if tag.startswith(_STANDARD_PREFIX):
        return "!!" + tag[len(_STANDARD_PREFIX):]
    return tag


def _is_null(node: Node | None) -> bool:
    return short_tag(node) == "!!null"


def decode_str(node: Node | None) -> str:
    """Decode a scalar as its literal text; null becomes an empty string."""
    if _is_null(node):
        return ""
    if isinstance(node, ScalarNode):
        return node.value
    raise YamlDecodeError.for_node(node, "string")


def decode_bool(node: Node | None) -> bool:
    """Decode a boolean scalar; null becomes ``False``."""
    if _is_null(node):
        return False
    if isinstance(node, ScalarNode):
        if node.value in _TRUE_WORDS:
            return True
        if node.value in _FALSE_WORDS:
            return False
    raise YamlDecodeError.for_node(node, "bool")


def decode_int(node: Node | None) -> int:
    """Decode an integer scalar; null becomes ``0``."""
    if _is_null(node):
        return 0
    if isinstance(node, ScalarNode):
        text = node.value.replace("_", "")
        for base in (0, 10):
            try:
                return int(text, base)
            except ValueError:
                continue
    raise YamlDecodeError.for_node(node, "int")


def decode_str_list(node: Node | None) -> list[str] | None:
    """Decode a sequence of scalars; null becomes ``None``."""
    if _is_null(node):
        return None
    if isinstance(node, SequenceNode):
        return [decode_str(item) for item in node.value]
    raise YamlDecodeError.for_node(node, "[]string")


def decode_list(
    node: Node | None, item_decoder: Callable[[Node], T]
) -> list[T | None] | None:
    """Decode a sequence with ``item_decoder``; null items become ``None``."""
    if _is_null(node):
        return None
    if isinstance(node, SequenceNode):
        return [None if _is_null(item) else item_decoder(item) for item in node.value]
    raise YamlDecodeError.for_node(node, "list")


def mapping_pairs(node: Node | None) -> list[tuple[str, Node]]:
    """Return the key text and value node of each mapping entry, in order."""
    if _is_null(node):
        return []
    if isinstance(node, MappingNode):
        return [
            (key.value if isinstance(key, ScalarNode) else "", value)
            for key, value in node.value
        ]
    raise YamlDecodeError.for_node(node, "mapping")