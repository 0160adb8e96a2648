"""Operating system and architecture constraints."""

from __future__ import annotations

from dataclasses import dataclass, replace

from yaml.nodes import Node, ScalarNode

from .yamlnodes import YamlDecodeError, decode_str, short_tag

_KNOWN_OS = frozenset(
    {
        "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos",
        "ios", "js", "linux", "nacl", "netbsd", "openbsd", "plan9", "solaris",
        "wasip1", "windows", "zos",
    }
)

_KNOWN_ARCH = frozenset(
    {
        "386", "amd64", "amd64p32", "arm", "armbe", "arm64", "arm64be",
        "loong64", "mips", "mipsle", "mips64", "mips64le", "mips64p32",
        "mips64p32le", "ppc", "ppc64", "ppc64le", "riscv", "riscv64", "s390",
        "s390x", "sparc", "sparc64", "wasm",
    }
)


def is_known_os(name: str) -> bool:
    """Return whether ``name`` is a recognised operating system."""
    return name in _KNOWN_OS


def is_known_arch(name: str) -> bool:
    """Return whether ``name`` is a recognised architecture."""
    return name in _KNOWN_ARCH


class InvalidPlatformError(YamlDecodeError):
    """Raised for a platform string that is not OS, Arch or OS/Arch."""

    def __init__(self, platform: str) -> None:
        super().__init__(f'task: Invalid platform "{platform}"')
        self.platform = platform


@dataclass
class Platform:
    """An operating system and/or architecture; empty means any."""

    os: str = ""
    arch: str = ""

    @classmethod
    def parse(cls, text: str) -> Platform:
        """Parse ``OS``, ``Arch`` or ``OS/Arch``."""
        parts = text.split("/")
        if len(parts) > 2:
            raise InvalidPlatformError(text)
        platform = cls()
        first = parts[0]
        if is_known_os(first):
            platform.os = first
        elif is_known_arch(first):
            platform.arch = first
        else:
            raise InvalidPlatformError(text)
        if len(parts) == 2:
            second = parts[1]
            if platform.arch or not is_known_arch(second):
                raise InvalidPlatformError(text)
            platform.arch = second
        return platform

    @classmethod
    def from_node(cls, node: Node | None) -> Platform:
        """Decode a platform from a scalar node."""
        if isinstance(node, ScalarNode):
            return cls.parse(decode_str(node))
        raise YamlDecodeError.at(
            node, f"cannot unmarshal {short_tag(node)} into platform"
        )

    def deep_copy(self) -> Platform:
        """Return an independent copy."""
        return replace(self)

    def matches(self, os_name: str, arch: str) -> bool:
        """Return whether this platform allows the given OS and architecture."""
        return (not self.os or self.os == os_name) and (
            not self.arch or self.arch == arch
        )