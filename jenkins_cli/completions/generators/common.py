"""Helpers shared by the shell script generators."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...commands.models import CommandNode

__all__ = ["function_name", "header", "help_text", "one_line", "path_key"]

_UNSAFE_IDENTIFIER = re.compile(r"[^A-Za-z0-9_]")


def one_line(text: str) -> str:
    """Collapse whitespace (newlines included) into single spaces."""
    return " ".join(text.split())


def path_key(path: tuple[str, ...]) -> str:
    """Space separated command path, empty for the root."""
    return " ".join(path)


def function_name(program: str, path: tuple[str, ...] = (), suffix: str = "") -> str:
    """Shell function name for a command path.

    E.g., ("jenkins", ("config", "use")) -> "_jenkins__config__use"

    Args:
        program: The program name
        path: Command path below the root
        suffix: Optional extra part, joined with a single underscore

    Returns:
        A name valid as a function identifier in every supported shell
    """
    name = "__".join(_UNSAFE_IDENTIFIER.sub("_", part) for part in (program, *path))
    return f"_{name}_{suffix}" if suffix else f"_{name}"


def header(title: str, shell: str, program: str) -> list[str]:
    """First lines of a generated script."""
    return [
        f"# {title} completion for {program}",
        f"# Generated by: {program} completion {shell}",
    ]


def help_text(node: CommandNode) -> str:
    """Single line help of a node."""
    return one_line(node.short_help)
