"""Fish completion script generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...commands.models import Choices, Dynamic, FreeText, NoValue
from ...constants import HIDDEN_COMPLETE_COMMAND
from .common import function_name, header, help_text, one_line, path_key

if TYPE_CHECKING:
    from ...commands.models import FlagSpec, ValueKind
    from ...commands.tree import CommandTree

__all__ = ["generate_fish"]


def _quote(text: str) -> str:
    """Single quote for fish, where backslash escapes backslash and quote."""
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _arguments(kind: ValueKind, dynamic: str) -> str | None:
    """The `-a` argument for a value, None when nothing is offered."""
    match kind:
        case Choices(values=values):
            return _quote(" ".join(values))
        case Dynamic():
            return _quote(f"({dynamic})")
        case NoValue() | FreeText():
            return None


def _walk_function(tree: CommandTree, name: str, prefix: str) -> list[str]:
    value_flags: list[str] = []
    switches: list[str] = []
    commands: list[str] = []
    for path, node in tree.walk():
        key = path_key(path)
        for flag in node.flags:
            if flag.takes_value:
                value_flags.extend(_quote(f"{key}|{form}") for form in flag.forms)
                switches.extend(_quote(f"{key}|{form}=*") for form in flag.forms)
            else:
                switches.extend(_quote(f"{key}|{form}") for form in flag.forms)
        commands.extend(_quote(f"{key}|{child.name}") for child in node.children)

    flag_cases = []
    if value_flags:
        flag_cases += [
            f"            case {' '.join(value_flags)}",
            f"                set {prefix}_value_flag $token",
            f"                set -a {prefix}_used $token",
            "                continue",
        ]
    if switches:
        flag_cases += [
            f"            case {' '.join(switches)}",
            f"                set -a {prefix}_used (string split -m 1 = -- $token)[1]",
            "                continue",
        ]
    flag_cases += ["            case '*|-*'", "                set stopped 1", "                continue"]

    command_block: list[str] = []
    if commands:
        command_block = [
            "        if test $stopped -eq 0",
            f'            switch "${prefix}_path|$token"',
            f"                case {' '.join(commands)}",
            f'                    set {prefix}_path (string trim -- "${prefix}_path $token")',
            f"                    set -g {prefix}_used",
            "                    continue",
            "            end",
            "        end",
        ]

    return [
        "# Sets the command path, positional count, pending value flag and flags used in the current command",
        f"function {name}",
        f"    set -g {prefix}_path ''",
        f"    set -g {prefix}_positional 0",
        f"    set -g {prefix}_value_flag ''",
        f"    set -g {prefix}_used",
        "    set -l stopped 0",
        "    set -l tokens (commandline -opc)",
        "    set -e tokens[1]",
        "    for token in $tokens",
        f'        if test -n "${prefix}_value_flag"',
        f"            set {prefix}_value_flag ''",
        "            if not string match -q -- '-*' $token",
        "                continue",
        "            end",
        "        end",
        f'        switch "${prefix}_path|$token"',
        *flag_cases,
        "        end",
        *command_block,
        "        set stopped 1",
        f"        set {prefix}_positional (math ${prefix}_positional + 1)",
        "    end",
        f"    set -g {prefix}_stopped $stopped",
        "end",
    ]


def _flag_condition(helper: str, used: str, key: str, flag: FlagSpec) -> str:
    return f"{helper} {_quote(key)}; and not {used} {' '.join(flag.forms)}"


def generate_fish(tree: CommandTree) -> str:
    """Generate the fish completion script.

    Previous completions for the program are erased first so the file can be
    sourced again.

    Args:
        tree: The command tree

    Returns:
        The fish completion script content
    """
    program = tree.program
    prefix = "_" + function_name(program)
    walk = f"{prefix}_walk"
    needs_command = f"{prefix}_needs_command"
    needs_value = f"{prefix}_needs_value"
    using_path = f"{prefix}_using_path"
    flag_used = f"{prefix}_flag_used"
    dynamic = f"{prefix}_complete"

    lines = [
        *header("Fish", "fish", program),
        "",
        "# Drop completions from a previous load",
        f"complete -c {program} -e",
        "",
        f"# Disable default file completions for {program}",
        f"complete -c {program} -f",
        "",
        *_walk_function(tree, walk, prefix),
        "",
        f"function {needs_command}",
        f"    {walk}",
        f'    test "${prefix}_path" = "$argv[1]" -a ${prefix}_stopped -eq 0 -a -z "${prefix}_value_flag"',
        "end",
        "",
        f"function {needs_value}",
        f"    {walk}",
        f'    test "${prefix}_path" = "$argv[1]" -a ${prefix}_positional -eq $argv[2] -a -z "${prefix}_value_flag"',
        "end",
        "",
        f"function {using_path}",
        f"    {walk}",
        f'    test "${prefix}_path" = "$argv[1]"',
        "end",
        "",
        f"function {flag_used}",
        "    for form in $argv",
        f"        contains -- $form ${prefix}_used; and return 0",
        "    end",
        "    return 1",
        "end",
        "",
        f"function {dynamic}",
        f"    command {program} {HIDDEN_COMPLETE_COMMAND} fish (commandline -cp) 2>/dev/null",
        "end",
    ]

    for path, node in tree.walk():
        key = path_key(path)
        entries: list[str] = []
        for child in node.children:
            entry = f"complete -c {program} -n {_quote(f'{needs_command} {_quote(key)}')} -a {_quote(child.name)}"
            description = help_text(child)
            entries.append(f"{entry} -d {_quote(description)}" if description else entry)
        for flag in node.flags:
            entry = f"complete -c {program} -n {_quote(_flag_condition(using_path, flag_used, key, flag))}"
            if flag.short:
                entry += f" -s {flag.short[1:]}"
            entry += f" -l {flag.name[2:]}"
            if flag.takes_value:
                entry += " -x"
                arguments = _arguments(flag.kind, dynamic)
                if arguments:
                    entry += f" -a {arguments}"
            if flag.help:
                entry += f" -d {_quote(one_line(flag.help))}"
            entries.append(entry)
        for index, positional in enumerate(node.positionals):
            arguments = _arguments(positional.kind, dynamic)
            if arguments is None:
                continue
            condition = _quote(f"{needs_value} {_quote(key)} {index}")
            entry = f"complete -c {program} -n {condition} -a {arguments}"
            if isinstance(positional.kind, Choices):
                entry += f" -d {_quote(positional.name)}"
            entries.append(entry)
        if entries:
            lines += ["", f"# {program} {key}".rstrip(), *entries]

    return "\n".join(lines) + "\n"
