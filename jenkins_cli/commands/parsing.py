"""Docstring and command name parsing utilities."""

from __future__ import annotations

import re

from .models import CommandArg

__all__ = ["parse_docstring", "split_command_name"]

# Regex pattern to match args: <required> or [optional]
_ARG_PATTERN = re.compile(r"([<\[])([^>\]]+)([>\]])")


def split_command_name(name: str) -> tuple[str, ...]:
    """Split a declared command name into its path segments.

    E.g., "config use" -> ("config", "use"), "  alias   add " -> ("alias", "add")

    Args:
        name: Space separated command name

    Returns:
        The path segments, root excluded
    """
    return tuple(name.split())


def parse_docstring(docstring: str) -> tuple[list[CommandArg], str, str]:
    """Parse a command docstring into arguments and descriptions.

    The first line may start with arguments:
    "<shell> [path] Generate a completion script"

    Args:
        docstring: The raw docstring to parse

    Returns:
        Tuple of (args, short_description, full_description)
    """
    if not docstring or not docstring.strip():
        return [], "", ""

    full_description = docstring.strip()
    first_line = full_description.split("\n", 1)[0].strip()

    args: list[CommandArg] = []
    position = 0
    for match in _ARG_PATTERN.finditer(first_line):
        # only leading args count, stop at the first word of the description
        if first_line[position : match.start()].strip():
            break
        args.append(CommandArg(value=match.group(2).strip(), required=match.group(1) == "<"))
        position = match.end()

    short_description = first_line[position:].strip() if args else first_line
    return args, short_description or first_line, full_description
