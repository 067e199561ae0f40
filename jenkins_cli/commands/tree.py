"""Hierarchical command tree building and lookup."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from .models import Choices, CommandArg, CommandInfo, CommandNode, FlagSpec, FreeText, PositionalSpec, ValueKind
from .parsing import split_command_name

__all__ = ["HELP_FLAG", "CommandTree", "build_command_tree"]

HELP_FLAG = FlagSpec(name="--help", short="-h", help="Print help")

_NAME_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")
_LONG_FLAG_PATTERN = re.compile(r"--[A-Za-z0-9][A-Za-z0-9_-]*")
_SHORT_FLAG_PATTERN = re.compile(r"-[A-Za-z0-9]")

ArgClassifier = Callable[[tuple[str, ...], CommandArg], ValueKind]


class CommandTree:
    """A validated, immutable command hierarchy rooted at the program name."""

    def __init__(self, root: CommandNode) -> None:
        _validate(root, is_root=True)
        self.root = root

    @property
    def program(self) -> str:
        """The program name completions are registered for."""
        return self.root.name

    def find(self, path: Sequence[str]) -> CommandNode | None:
        """Return the node at `path` (segments below the root), if any."""
        node: CommandNode | None = self.root
        for name in path:
            if node is None:
                break
            node = node.child(name)
        return node

    def walk(self) -> Iterator[tuple[tuple[str, ...], CommandNode]]:
        """Yield every (path, node) pair depth-first, in declaration order."""
        return self.root.iter_nodes()

    def __repr__(self) -> str:
        return f"CommandTree({self.program!r}, nodes={sum(1 for _ in self.walk())})"


def _validate(node: CommandNode, is_root: bool = False) -> None:
    """Check names and uniqueness for a node and its subtree.

    Raises:
        ValueError: If a name is empty, malformed or duplicated
    """
    kind = "program" if is_root else "command"
    if not _NAME_PATTERN.fullmatch(node.name):
        msg = f"Invalid {kind} name: {node.name!r}"
        raise ValueError(msg)

    seen_children: set[str] = set()
    for child in node.children:
        if child.name in seen_children:
            msg = f"Duplicate subcommand {child.name!r} under {node.name!r}"
            raise ValueError(msg)
        seen_children.add(child.name)

    seen_flags: set[str] = set()
    for flag in node.flags:
        if not _LONG_FLAG_PATTERN.fullmatch(flag.name):
            msg = f"Invalid flag name {flag.name!r} on {node.name!r}"
            raise ValueError(msg)
        if flag.short and not _SHORT_FLAG_PATTERN.fullmatch(flag.short):
            msg = f"Invalid short flag {flag.short!r} on {node.name!r}"
            raise ValueError(msg)
        for form in flag.forms:
            if form in seen_flags:
                msg = f"Duplicate flag {form!r} on {node.name!r}"
                raise ValueError(msg)
            seen_flags.add(form)

    for spec in (*node.flags, *node.positionals):
        if not isinstance(spec.kind, Choices):
            continue
        for value in spec.kind.values:
            if not _NAME_PATTERN.fullmatch(value):
                msg = f"Invalid choice {value!r} on {node.name!r}"
                raise ValueError(msg)

    for child in node.children:
        _validate(child)


@dataclass
class _Draft:
    """Mutable node used while the tree is assembled."""

    name: str
    info: CommandInfo | None = None
    children: dict[str, _Draft] = field(default_factory=dict)

    def freeze(self, path: tuple[str, ...], classify: ArgClassifier) -> CommandNode:
        info = self.info
        flags = tuple(info.flags) if info else ()
        if not any(flag.name == HELP_FLAG.name for flag in flags):
            flags = (*flags, HELP_FLAG)
        positionals: tuple[PositionalSpec, ...] = ()
        if info:
            positionals = tuple(
                PositionalSpec(name=arg.value, kind=classify(path, arg), required=arg.required) for arg in info.args
            )
        return CommandNode(
            name=self.name,
            short_help=info.short_description if info else "",
            long_help=info.full_description if info else "",
            children=tuple(child.freeze((*path, name), classify) for name, child in self.children.items()),
            flags=flags,
            positionals=positionals,
        )


def _free_text(_path: tuple[str, ...], arg: CommandArg) -> ValueKind:
    return FreeText(hint=arg.value)


def build_command_tree(
    program: str,
    commands: dict[str, CommandInfo],
    classify: ArgClassifier | None = None,
    root: CommandInfo | None = None,
) -> CommandTree:
    """Build a command tree from space separated command names.

    "config use" becomes the child "use" of "config". Parent nodes that are not
    declared themselves are created without help text. Every node accepts
    -h/--help.

    Args:
        program: The program name, used as the root node
        commands: Declared commands, in the order they should be offered
        classify: Maps a command path and one of its arguments to a ValueKind,
            free text by default
        root: Help and global flags of the program itself

    Returns:
        The validated command tree

    Raises:
        ValueError: If a declaration is malformed
    """
    top = _Draft(name=program, info=root)
    for name, info in commands.items():
        parts = split_command_name(name)
        if not parts:
            msg = f"Empty command name for {info!r}"
            raise ValueError(msg)
        node = top
        for part in parts:
            node = node.children.setdefault(part, _Draft(name=part))
        if node.info is not None:
            msg = f"Command declared twice: {name!r}"
            raise ValueError(msg)
        node.info = info

    return CommandTree(top.freeze((), classify or _free_text))
