"""PowerShell completion script generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...commands.models import Choices, Dynamic, FreeText, NoValue
from ...constants import HIDDEN_COMPLETE_COMMAND
from .common import header, help_text, one_line, path_key

if TYPE_CHECKING:
    from ...commands.models import CommandNode, ValueKind
    from ...commands.tree import CommandTree

__all__ = ["generate_powershell"]

# PowerShell also treats typographic single quotes as quote characters
_SINGLE_QUOTES = ("'", "‘", "’", "‚", "‛")


def _quote(text: str) -> str:
    """Single quoted PowerShell string."""
    for char in _SINGLE_QUOTES:
        text = text.replace(char, char * 2)
    return f"'{text}'"


def _values(kind: ValueKind, tooltip: str, indent: str) -> list[str]:
    """Statements emitting the completion results of a value."""
    match kind:
        case Choices(values=values):
            return [f"{indent}& $result {_quote(value)} {_quote(tooltip)} 'ParameterValue'" for value in values]
        case Dynamic():
            return [f"{indent}& $dynamic"]
        case NoValue() | FreeText():
            return []


def _branch(pattern: str, body: list[str], indent: str) -> list[str]:
    if not body:
        return []
    return [f"{indent}{_quote(pattern)} {{", *body, f"{indent}}}"]


def _switch(subject: str, branches: list[str], indent: str, default: str | None = None, assign: str = "") -> list[str]:
    if default is not None:
        branches = [*branches, f"{indent}    default {{ {default} }}"]
    if not branches:
        return []
    return [f"{indent}{assign}switch -CaseSensitive -Exact ({subject}) {{", *branches, f"{indent}}}"]


def _word_body(node: CommandNode, indent: str) -> list[str]:
    body: list[str] = []
    if node.children:
        body.append(f"{indent}if (-not $stopped) {{")
        for child in node.children:
            body.append(f"{indent}    & $result {_quote(child.name)} {_quote(help_text(child))} 'ParameterValue'")
        body.append(f"{indent}}}")
    for index, positional in enumerate(node.positionals):
        values = _values(positional.kind, positional.name, indent + "    ")
        if values:
            body += [f"{indent}if ($positional -eq {index}) {{", *values, f"{indent}}}"]
    return body


def generate_powershell(tree: CommandTree) -> str:
    """Generate the PowerShell completion script.

    Registers a native argument completer. The script block walks the
    command elements before the cursor to a command path, then emits
    CompletionResult entries with tooltips.

    Args:
        tree: The command tree

    Returns:
        The PowerShell completion script content
    """
    program = tree.program
    flag_kinds: list[str] = []
    commands: list[str] = []
    value_branches: list[str] = []
    flag_branches: list[str] = []
    word_branches: list[str] = []

    for path, node in tree.walk():
        key = path_key(path)
        for flag in node.flags:
            kind = "'value'" if flag.takes_value else "'switch'"
            flag_kinds.extend(f"            {_quote(f'{key}|{form}')} {{ {kind} }}" for form in flag.forms)
            for form in flag.forms:
                value_branches += _branch(
                    f"{key}|{form}", _values(flag.kind, one_line(flag.help), "                    "), "                "
                )
        commands.extend(f"            {_quote(path_key((*path, child.name)))} {{ $true }}" for child in node.children)
        flag_calls = [
            f"                    & $flag {_quote(flag.name)} {_quote(flag.short)} {_quote(one_line(flag.help))}"
            for flag in node.flags
        ]
        flag_branches += _branch(key, flag_calls, "                ")
        word_branches += _branch(key, _word_body(node, "                    "), "                ")

    lines = [
        *header("PowerShell", "powershell", program),
        "",
        f"Register-ArgumentCompleter -Native -CommandName {_quote(program)} -ScriptBlock {{",
        "    param($wordToComplete, $commandAst, $cursorPosition)",
        "",
        "    $line = $commandAst.Extent.Text",
        "    $offset = $cursorPosition - $commandAst.Extent.StartOffset",
        "    if ($offset -lt $line.Length) {",
        "        $line = $line.Substring(0, $offset)",
        "    }",
        "    if ($wordToComplete -eq '' -and $line -notmatch '\\s$') {",
        "        $line += ' '",
        "    }",
        "",
        "    $result = {",
        "        param($text, $tooltip, $type)",
        "        if (-not $tooltip) { $tooltip = $text }",
        "        [System.Management.Automation.CompletionResult]::new($text, $text, $type, $tooltip)",
        "    }",
        "    $dynamic = {",
        f"        & {_quote(program)} {_quote(HIDDEN_COMPLETE_COMMAND)} 'powershell' $line 2>$null | ForEach-Object {{",
        "            $value, $tooltip = $_ -split \"`t\", 2",
        "            if ($value) { & $result $value $tooltip 'ParameterValue' }",
        "        }",
        "    }",
        "    $flag = {",
        "        param($long, $short, $tooltip)",
        "        if ($seen -ccontains $long -or ($short -and $seen -ccontains $short)) { return }",
        "        if ($long.StartsWith($wordToComplete, [System.StringComparison]::Ordinal)) {",
        "            & $result $long $tooltip 'ParameterName'",
        "        }",
        "        elseif ($short -and $short.StartsWith($wordToComplete, [System.StringComparison]::Ordinal)) {",
        "            & $result $short $tooltip 'ParameterName'",
        "        }",
        "    }",
        "",
        "    $path = ''",
        "    $positional = 0",
        "    $stopped = $false",
        "    $valueFlag = ''",
        "    $seen = [System.Collections.Generic.List[string]]::new()",
        "    foreach ($element in @($commandAst.CommandElements | Select-Object -Skip 1)) {",
        "        if ($element.Extent.EndOffset -ge $cursorPosition) { break }",
        "        $word = $element.Extent.Text",
        "        if ($valueFlag) {",
        "            $valueFlag = ''",
        "            if (-not $word.StartsWith('-')) { continue }",
        "        }",
        "        $name, $inlineValue = $word -split '=', 2",
        *_switch('"$path|$name"', flag_kinds, "        ", default="''", assign="$kind = "),
        "        if ($kind -eq 'switch' -and $null -ne $inlineValue) { $kind = '' }",
        "        if ($kind) { $seen.Add($name) }",
        "        if ($kind -eq 'value' -and $null -eq $inlineValue) {",
        "            $valueFlag = $name",
        "            continue",
        "        }",
        "        if ($kind) { continue }",
        "        if ($word.StartsWith('-')) {",
        "            $stopped = $true",
        "            continue",
        "        }",
        "        $candidate = if ($path) { \"$path $word\" } else { $word }",
        *_switch("$candidate", commands, "        ", default="$false", assign="$isCommand = "),
        "        if (-not $stopped -and $isCommand) {",
        "            $path = $candidate",
        "            $seen.Clear()",
        "            continue",
        "        }",
        "        $stopped = $true",
        "        $positional++",
        "    }",
        "",
        "    $completions = @(",
        "        if ($valueFlag -and -not $wordToComplete.StartsWith('-')) {",
        *_switch('"$path|$valueFlag"', value_branches, "            "),
        "        }",
        "        elseif ($wordToComplete.StartsWith('-')) {",
        *_switch("$path", flag_branches, "            "),
        "        }",
        "        else {",
        *_switch("$path", word_branches, "            "),
        "        }",
        "    )",
        "    $completions | Where-Object { $_.CompletionText.StartsWith($wordToComplete, [System.StringComparison]::Ordinal) }",
        "}",
    ]
    return "\n".join(lines) + "\n"
