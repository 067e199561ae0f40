"""Data models for the command tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

__all__ = [
    "Choices",
    "CommandArg",
    "CommandInfo",
    "CommandNode",
    "Dynamic",
    "FlagSpec",
    "FreeText",
    "NoValue",
    "PositionalSpec",
    "ValueKind",
]


@dataclass(frozen=True)
class NoValue:
    """The flag is a switch and takes no value."""


@dataclass(frozen=True)
class FreeText:
    """Any text is accepted, nothing is offered."""

    hint: str = ""


@dataclass(frozen=True)
class Choices:
    """A fixed, ordered list of accepted values."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class Dynamic:
    """Values computed at completion time by a resolver, looked up by key."""

    key: str


ValueKind = NoValue | FreeText | Choices | Dynamic


@dataclass(frozen=True)
class FlagSpec:
    """An option accepted by a command.

    `name` is the long form (e.g. "--follow"), `short` the optional short
    form (e.g. "-f").
    """

    name: str
    short: str = ""
    help: str = ""
    kind: ValueKind = NoValue()

    @property
    def takes_value(self) -> bool:
        """Whether the next token is consumed as this flag's value."""
        return not isinstance(self.kind, NoValue)

    @property
    def forms(self) -> tuple[str, ...]:
        """Accepted spellings, long form first."""
        return (self.name, self.short) if self.short else (self.name,)

    def matches(self, token: str) -> bool:
        """Check whether a token spells this flag, including `--name=value` and `-n=value`."""
        if token in self.forms:
            return True
        return self.takes_value and token.startswith(tuple(f"{form}=" for form in self.forms))


@dataclass(frozen=True)
class PositionalSpec:
    """A positional argument slot."""

    name: str
    help: str = ""
    kind: ValueKind = FreeText()
    required: bool = False


@dataclass(frozen=True)
class CommandNode:
    """A node in the command hierarchy.

    The root node carries the program name. Children, flags and positionals
    are kept in declaration order.
    """

    name: str
    short_help: str = ""
    long_help: str = ""
    children: tuple[CommandNode, ...] = ()
    flags: tuple[FlagSpec, ...] = ()
    positionals: tuple[PositionalSpec, ...] = ()

    def child(self, name: str) -> CommandNode | None:
        """Return the direct child called `name`, if any."""
        for node in self.children:
            if node.name == name:
                return node
        return None

    def find_flag(self, token: str) -> FlagSpec | None:
        """Return the flag spelled by `token`, if this node accepts it."""
        for flag in self.flags:
            if flag.matches(token):
                return flag
        return None

    def iter_nodes(self, path: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], CommandNode]]:
        """Yield (path, node) pairs depth-first, this node included.

        Args:
            path: Path of this node, relative to the root

        Yields:
            The path of each node (the root has an empty path) with the node
        """
        yield path, self
        for node in self.children:
            yield from node.iter_nodes((*path, node.name))


@dataclass
class CommandArg:
    """An argument parsed from a command's docstring."""

    value: str  # e.g., "bash|zsh" or "job_name"
    required: bool  # True for <arg>, False for [arg]


@dataclass
class CommandInfo:
    """Complete information about a declared command."""

    name: str  # space separated path, e.g. "config use"
    args: list[CommandArg]
    short_description: str
    full_description: str
    flags: list[FlagSpec] = field(default_factory=list)
