"""Zsh completion script generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...commands.models import Choices, Dynamic, FreeText, NoValue
from ...constants import HIDDEN_COMPLETE_COMMAND
from .common import function_name, header, help_text, one_line

if TYPE_CHECKING:
    from ...commands.models import CommandNode, FlagSpec, PositionalSpec, ValueKind
    from ...commands.tree import CommandTree

__all__ = ["generate_zsh"]


def _quote(text: str) -> str:
    """Single quote for the shell."""
    return "'" + text.replace("'", "'\\''") + "'"


def _spec_text(text: str) -> str:
    """Escape text used inside an `_arguments` spec (descriptions, messages)."""
    text = one_line(text)
    for char in ("\\", "[", "]", ":"):
        text = text.replace(char, "\\" + char)
    return text


def _action(kind: ValueKind, dynamic: str) -> str:
    match kind:
        case Choices(values=values):
            return f"({' '.join(values)})"
        case Dynamic():
            return dynamic
        case NoValue() | FreeText():
            return " "


def _flag_spec(flag: FlagSpec, dynamic: str) -> str:
    forms = flag.forms
    exclusion = _quote(f"({' '.join(forms)})")
    names = "{" + ",".join(forms) + "}" if len(forms) > 1 else forms[0]
    value = ""
    if flag.takes_value:
        hint = flag.kind.hint if isinstance(flag.kind, FreeText) else ""
        message = hint or flag.name.lstrip("-")
        value = f":{_spec_text(message)}:{_action(flag.kind, dynamic)}"
    return f"{exclusion}{names}{_quote(f'[{_spec_text(flag.help)}]{value}')}"


def _positional_spec(index: int, positional: PositionalSpec, dynamic: str) -> str:
    optional = "" if positional.required else ":"
    return _quote(f"{index}:{optional}{_spec_text(positional.name)}:{_action(positional.kind, dynamic)}")


def _node_functions(program: str, path: tuple[str, ...], node: CommandNode, dynamic: str) -> list[str]:
    func = function_name(program, path)
    specs = [_flag_spec(flag, dynamic) for flag in node.flags]
    if node.children:
        specs.append(_quote(f"1: :{function_name(program, path, 'commands')}"))
        specs.append(_quote("*:: :->args"))
    else:
        specs.extend(_positional_spec(index, positional, dynamic) for index, positional in enumerate(node.positionals, 1))

    lines = [f"{func}() {{"]
    if not path:
        # keep the unshifted words for the dynamic lookups
        lines += [
            f"    local {func}_current=$CURRENT",
            f"    local -a {func}_words",
            f'    {func}_words=("${{words[@]}}")',
        ]
    if node.children:
        lines.append('    local curcontext="$curcontext" state line')
        lines.append("    _arguments -C \\")
    else:
        lines.append("    _arguments \\")
    lines.extend(f"        {spec} \\" for spec in specs[:-1])
    lines.append(f"        {specs[-1]}")

    if node.children:
        lines += ["", "    case $state in", "        args)", "            case $line[1] in"]
        for child in node.children:
            lines.append(f"                {child.name}) {function_name(program, (*path, child.name))} ;;")
        lines += ["            esac", "            ;;", "    esac"]
    lines.append("}")

    if node.children:
        entries = []
        for child in node.children:
            description = help_text(child)
            entry = f"{child.name}:{description}" if description else child.name
            entries.append(f"        {_quote(entry)}")
        title = " ".join((program, *path, "command"))
        lines += [
            "",
            f"{function_name(program, path, 'commands')}() {{",
            "    local -a commands",
            "    commands=(",
            *entries,
            "    )",
            f"    _describe -t commands {_quote(title)} commands",
            "}",
        ]
    return lines


def generate_zsh(tree: CommandTree) -> str:
    """Generate the zsh completion script.

    One `_arguments` function per command. The file works both autoloaded
    from fpath and sourced.

    Args:
        tree: The command tree

    Returns:
        The zsh completion script content
    """
    program = tree.program
    main_func = function_name(program)
    dynamic = function_name(program, suffix="dynamic")

    lines = [
        f"#compdef {program}",
        *header("Zsh", "zsh", program),
        "",
        "# Offers the dynamic values computed by the program for the current line",
        f"{dynamic}() {{",
        "    local -a candidates",
        f'    local line="${{(j: :){main_func}_words[1,{main_func}_current-1]}} $PREFIX"',
        f'    candidates=(${{(f)"$(command {program} {HIDDEN_COMPLETE_COMMAND} zsh "$line" 2>/dev/null)"}})',
        "    _describe -t values 'value' candidates",
        "}",
    ]
    for path, node in tree.walk():
        lines.append("")
        lines.extend(_node_functions(program, path, node, dynamic))

    lines += [
        "",
        f'if [ "$funcstack[1]" = "{main_func}" ]; then',
        f'    {main_func} "$@"',
        "elif (( $+functions[compdef] )); then",
        f"    compdef {main_func} {program}",
        "fi",
    ]
    return "\n".join(lines) + "\n"
