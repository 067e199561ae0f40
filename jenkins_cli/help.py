"""Help text for jenkins commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .ansi import HelpStyles, colorize
from .commands.models import Choices, FreeText

if TYPE_CHECKING:
    from .commands.models import CommandNode, FlagSpec
    from .commands.tree import CommandTree

__all__ = ["get_command_help", "get_help"]


def _flag_usage(flag: FlagSpec) -> str:
    forms = ", ".join(reversed(flag.forms))
    if not flag.takes_value:
        return forms
    if isinstance(flag.kind, Choices):
        return f"{forms} <{'|'.join(flag.kind.values)}>"
    hint = flag.kind.hint if isinstance(flag.kind, FreeText) and flag.kind.hint else flag.name[2:].upper()
    return f"{forms} <{hint}>"


def _usage(program: str, path: tuple[str, ...], node: CommandNode) -> str:
    parts = [program, *path]
    if node.children:
        parts.append("<command>")
    parts.extend(f"<{p.name}>" if p.required else f"[{p.name}]" for p in node.positionals)
    if node.flags:
        parts.append("[options]")
    return " ".join(parts)


def _plain(text: str, *_codes: str) -> str:
    return text


def get_help(tree: CommandTree, color: bool = False) -> str:
    """Get the help documentation for the top-level commands.

    Args:
        tree: The command tree
        color: Use terminal colors
    """
    style = colorize if color else _plain
    lines = [
        style("Syntax:", *HelpStyles.HEADING) + " " + _usage(tree.program, (), tree.root),
        "",
        style("Available commands:", *HelpStyles.HEADING),
    ]
    for node in tree.root.children:
        summary = node.short_help
        if node.children:
            summary = f"<{'|'.join(child.name for child in node.children)}> {summary}".strip()
        lines.append("  " + style(f"{node.name:12s}", *HelpStyles.COMMAND) + f" {summary}")
    lines.append("")
    lines.append(f"Run '{tree.program} <command> --help' for details on a command.")
    return "\n".join(lines) + "\n"


def get_command_help(tree: CommandTree, path: tuple[str, ...], color: bool = False) -> str:
    """Get detailed help for a command.

    Args:
        tree: The command tree
        path: The command path, e.g. ("config", "use")
        color: Use terminal colors

    Returns:
        Usage, description, subcommands and options of the command
    """
    node = tree.find(path)
    if node is None:
        return f"Unknown command: {' '.join(path)}\nRun '{tree.program} --help' for available commands.\n"

    style = colorize if color else _plain
    lines = [style("Usage:", *HelpStyles.HEADING) + " " + _usage(tree.program, path, node), ""]
    if node.long_help:
        lines += [node.long_help, ""]

    if node.children:
        lines.append(style("Subcommands:", *HelpStyles.HEADING))
        lines.extend("  " + style(f"{child.name:15s}", *HelpStyles.COMMAND) + f" {child.short_help}" for child in node.children)
        lines.append("")

    if node.flags:
        lines.append(style("Options:", *HelpStyles.HEADING))
        lines.extend("  " + style(f"{_flag_usage(flag):24s}", *HelpStyles.OPTION) + f" {flag.help}" for flag in node.flags)
        lines.append("")

    return "\n".join(lines)
