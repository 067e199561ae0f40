"""The hidden `__complete` request used by the generated scripts.

`jenkins __complete <shell> <line> [<cursor>]` prints one candidate per line:

- bash: `value`
- zsh: `value:description`, colons in the value escaped
- fish and powershell: `value<TAB>description`
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..constants import RESOLVE_TIMEOUT
from ..logging_setup import get_logger
from ..models import Shell
from .engine import complete
from .models import CompletionCandidate, CompletionRequest

if TYPE_CHECKING:
    from ..commands.tree import CommandTree
    from .resolver import ValueResolver

__all__ = ["format_candidates", "handle_complete_request"]


def _one_line(text: str) -> str:
    return " ".join(text.split())


def _format_candidate(shell: Shell, candidate: CompletionCandidate) -> str:
    value = _one_line(candidate.value)
    description = _one_line(candidate.description)
    match shell:
        case Shell.BASH:
            return value
        case Shell.ZSH:
            value = value.replace("\\", "\\\\").replace(":", "\\:")
            return f"{value}:{description}" if description else value
        case Shell.FISH | Shell.POWERSHELL:
            return f"{value}\t{description}" if description else value


def format_candidates(shell: Shell, candidates: list[CompletionCandidate]) -> str:
    """Render candidates in the line format the shell's script reads.

    Args:
        shell: The requesting shell
        candidates: Ordered candidates

    Returns:
        One candidate per line, with a trailing newline unless empty
    """
    lines = [_format_candidate(shell, candidate) for candidate in candidates]
    return "".join(f"{line}\n" for line in lines if line)


async def handle_complete_request(
    tree: CommandTree,
    args: list[str],
    resolver: ValueResolver,
    timeout: float = RESOLVE_TIMEOUT,
) -> str:
    """Answer a completion request coming from a generated script.

    Malformed requests give an empty answer: the shell must never see an
    error.

    Args:
        tree: The command tree
        args: Arguments after `__complete`: shell, line and optional cursor
        resolver: Source of dynamic values
        timeout: Maximum wait (seconds) for the resolver

    Returns:
        The formatted candidates
    """
    log = get_logger("completion")
    if len(args) not in (2, 3):
        log.debug("Ignoring malformed completion request: %r", args)
        return ""
    try:
        shell = Shell(args[0])
        cursor = int(args[2]) if len(args) == 3 else None
        request = CompletionRequest.from_line(args[1], cursor)
    except ValueError as e:
        log.debug("Ignoring malformed completion request: %s", e)
        return ""
    return format_candidates(shell, await complete(tree, request, resolver, timeout))
