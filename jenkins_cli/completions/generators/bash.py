"""Bash completion script generator."""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING

from ...commands.models import Choices, Dynamic, FreeText, NoValue
from ...constants import HIDDEN_COMPLETE_COMMAND
from .common import function_name, header, path_key

if TYPE_CHECKING:
    from ...commands.models import CommandNode, ValueKind
    from ...commands.tree import CommandTree

__all__ = ["generate_bash"]


def _pattern(key: str, word: str) -> str:
    """Quoted `case` pattern matching "<path>|<word>"."""
    return shlex.quote(f"{key}|{word}")


def _value_action(kind: ValueKind, dynamic: str) -> str | None:
    """Command filling COMPREPLY for a value, None when nothing is offered."""
    match kind:
        case Choices(values=values):
            return f'COMPREPLY+=($(compgen -W {shlex.quote(" ".join(values))} -- "$cur"))'
        case Dynamic():
            return dynamic
        case NoValue() | FreeText():
            return None


def _walk_cases(tree: CommandTree) -> tuple[list[str], list[str], list[str]]:
    """Collect the `case` patterns of the command line walker.

    Returns:
        Tuple of (value flag patterns, switch patterns, subcommand patterns)
    """
    value_flags: list[str] = []
    switches: list[str] = []
    commands: list[str] = []
    for path, node in tree.walk():
        key = path_key(path)
        for flag in node.flags:
            if flag.takes_value:
                value_flags.extend(_pattern(key, form) for form in flag.forms)
                switches.extend(_pattern(key, f"{form}=") + "*" for form in flag.forms)
            else:
                switches.extend(_pattern(key, form) for form in flag.forms)
        commands.extend(_pattern(key, child.name) for child in node.children)
    return value_flags, switches, commands


def _value_flag_branches(tree: CommandTree, dynamic: str) -> list[str]:
    lines: list[str] = []
    for path, node in tree.walk():
        key = path_key(path)
        for flag in node.flags:
            action = _value_action(flag.kind, dynamic)
            if action is None:
                continue
            patterns = "|".join(_pattern(key, form) for form in flag.forms)
            lines.append(f"            {patterns}) {action} ;;")
    return lines


def _flag_branches(tree: CommandTree, program: str) -> list[str]:
    lines: list[str] = []
    for path, node in tree.walk():
        if not node.flags:
            continue
        groups = " ".join(shlex.quote(" ".join(flag.forms)) for flag in node.flags)
        lines.append(f"            {shlex.quote(path_key(path))})")
        lines.append(f"                {function_name(program, suffix='flags')} {groups}")
        lines.append("                ;;")
    return lines


def _node_word_lines(node: CommandNode, dynamic: str) -> list[str]:
    lines: list[str] = []
    if node.children:
        names = shlex.quote(" ".join(child.name for child in node.children))
        lines.append(f'            ((stopped)) || COMPREPLY+=($(compgen -W {names} -- "$cur"))')
    positional_cases = []
    for index, positional in enumerate(node.positionals):
        action = _value_action(positional.kind, dynamic)
        if action is not None:
            positional_cases.append(f"                {index}) {action} ;;")
    if positional_cases:
        lines.append("            case $positional in")
        lines.extend(positional_cases)
        lines.append("            esac")
    return lines


def _word_branches(tree: CommandTree, dynamic: str) -> list[str]:
    lines: list[str] = []
    for path, node in tree.walk():
        body = _node_word_lines(node, dynamic)
        if not body:
            continue
        lines.append(f"        {shlex.quote(path_key(path))})")
        lines.extend(body)
        lines.append("            ;;")
    return lines


def _case(subject: str, branches: list[str], indent: str = "        ") -> list[str]:
    if not branches:
        return []
    return [f'{indent}case "{subject}" in', *branches, f"{indent}esac"]


def generate_bash(tree: CommandTree) -> str:
    """Generate the bash completion script.

    The script walks COMP_WORDS to find the command path, then offers
    subcommands, unused flags or values. Dynamic values are requested from
    the program itself.

    Args:
        tree: The command tree

    Returns:
        The bash completion script content
    """
    program = tree.program
    main_func = function_name(program)
    flags_func = function_name(program, suffix="flags")
    dynamic_func = function_name(program, suffix="dynamic")
    value_flags, switches, commands = _walk_cases(tree)

    walker_flag_branches: list[str] = []
    if value_flags:
        walker_flag_branches += [
            f"            {'|'.join(value_flags)})",
            '                value_flag="$word"',
            '                used+="$word "',
            "                continue",
            "                ;;",
        ]
    if switches:
        walker_flag_branches += [
            f"            {'|'.join(switches)})",
            '                used+="${word%%=*} "',
            "                continue",
            "                ;;",
        ]
    walker_flag_branches += ["            *'|-'*)", "                stopped=1", "                continue", "                ;;"]

    walker_command_branches = []
    if commands:
        walker_command_branches = [
            "        if ((stopped == 0)); then",
            *_case(
                "$path|$word",
                [
                    f"                {'|'.join(commands)})",
                    '                    path="${path:+$path }$word"',
                    '                    used=" "',
                    "                    continue",
                    "                    ;;",
                ],
                indent="            ",
            ),
            "        fi",
        ]

    lines = [
        *header("Bash", "bash", program),
        "",
        "# Appends the dynamic values computed by the program for the current line",
        f"{dynamic_func}() {{",
        "    local candidate",
        "    while IFS= read -r candidate; do",
        '        [[ -n $candidate && $candidate == "$cur"* ]] && COMPREPLY+=("$candidate")',
        f'    done < <(command {program} {HIDDEN_COMPLETE_COMMAND} bash "${{COMP_LINE:0:COMP_POINT}}" 2>/dev/null)',
        "}",
        "",
        '# Offers the flags not used in the current command, one "long [short]" group per argument',
        f"{flags_func}() {{",
        "    local group long short",
        '    for group in "$@"; do',
        '        read -r long short <<< "$group"',
        '        [[ $used == *" $long "* ]] && continue',
        '        [[ -n $short && $used == *" $short "* ]] && continue',
        '        if [[ $long == "$cur"* ]]; then',
        "            COMPREPLY+=(\"$long\")",
        '        elif [[ -n $short && $short == "$cur"* ]]; then',
        "            COMPREPLY+=(\"$short\")",
        "        fi",
        "    done",
        "}",
        "",
        f"{main_func}() {{",
        '    local cur="${COMP_WORDS[COMP_CWORD]}"',
        '    local path="" value_flag="" used=" " word i',
        "    local stopped=0 positional=0 glued=0",
        "    COMPREPLY=()",
        "",
        "    for ((i = 1; i < COMP_CWORD; i++)); do",
        '        word="${COMP_WORDS[i]}"',
        "        # COMP_WORDBREAKS splits --flag=value into three words",
        '        if [[ $word == "=" ]]; then',
        "            glued=1",
        "            continue",
        "        fi",
        "        if ((glued)); then",
        "            [[ -n $value_flag ]] || stopped=1",
        '            glued=0 value_flag=""',
        "            continue",
        "        fi",
        "        if [[ -n $value_flag ]]; then",
        '            value_flag=""',
        "            [[ $word == -* ]] || continue",
        "        fi",
        *_case("$path|$word", walker_flag_branches),
        *walker_command_branches,
        "        stopped=1",
        "        ((++positional))",
        "    done",
        "",
        "    # values inside --flag=value are not completed",
        '    if ((glued)) || [[ $cur == "=" ]]; then',
        "        return 0",
        "    fi",
        "",
        "    if [[ -n $value_flag && $cur != -* ]]; then",
        *_case("$path|$value_flag", _value_flag_branches(tree, dynamic_func)),
        "        return 0",
        "    fi",
        "",
        "    if [[ $cur == -* ]]; then",
        *_case("$path", _flag_branches(tree, program)),
        "        return 0",
        "    fi",
        "",
        *_case("$path", _word_branches(tree, dynamic_func), indent="    "),
        "    return 0",
        "}",
        "",
        "if ((BASH_VERSINFO[0] > 4 || (BASH_VERSINFO[0] == 4 && BASH_VERSINFO[1] >= 4))); then",
        f"    complete -o nosort -F {main_func} {program}",
        "else",
        f"    complete -F {main_func} {program}",
        "fi",
    ]
    return "\n".join(lines) + "\n"
