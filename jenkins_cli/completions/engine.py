"""Completion engine.

Maps a partial command line to the ordered candidates for the word under the
cursor, using the command tree and a dynamic value resolver.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..commands.models import Choices, Dynamic, FreeText, NoValue
from ..constants import RESOLVE_TIMEOUT
from ..logging_setup import get_logger
from .models import CompletionCandidate

if TYPE_CHECKING:
    import logging

    from ..commands.models import CommandNode, FlagSpec, ValueKind
    from ..commands.tree import CommandTree
    from .models import CompletionRequest
    from .resolver import ValueResolver

__all__ = ["complete"]


@dataclass
class _Context:
    """Where the completed words lead in the tree."""

    node: CommandNode
    used_flags: set[str] = field(default_factory=set)
    pending_flag: FlagSpec | None = None
    positional_count: int = 0
    stopped: bool = False


def _walk(tree: CommandTree, words: tuple[str, ...]) -> _Context:
    """Follow the completed words down the tree.

    Descending stops at the first word that is neither a subcommand nor a
    known flag. Later words still mark flags as used and fill positionals.
    """
    ctx = _Context(node=tree.root)
    for word in words:
        if ctx.pending_flag is not None:
            ctx.pending_flag = None
            if not word.startswith("-"):
                continue

        flag = ctx.node.find_flag(word)
        if flag is not None:
            ctx.used_flags.add(flag.name)
            if flag.takes_value and "=" not in word:
                ctx.pending_flag = flag
            continue

        if word.startswith("-"):
            ctx.stopped = True
            continue

        child = None if ctx.stopped else ctx.node.child(word)
        if child is not None:
            ctx.node = child
            ctx.used_flags = set()
            continue

        ctx.stopped = True
        ctx.positional_count += 1
    return ctx


def _flag_candidates(ctx: _Context, prefix: str) -> list[CompletionCandidate]:
    candidates = []
    for flag in ctx.node.flags:
        if flag.name in ctx.used_flags:
            continue
        if flag.name.startswith(prefix):
            candidates.append(CompletionCandidate(flag.name, flag.help))
        elif flag.short and flag.short.startswith(prefix):
            candidates.append(CompletionCandidate(flag.short, flag.help))
    return candidates


async def _resolve(resolver: ValueResolver, key: str, timeout: float, log: logging.Logger) -> list[CompletionCandidate]:
    """Call the resolver with a bounded wait, absorbing every failure."""
    try:
        return list(await asyncio.wait_for(resolver.resolve(key), timeout=timeout))
    except TimeoutError:
        log.debug("Resolving %s took more than %ss", key, timeout)
    except Exception:  # pylint: disable=W0718
        log.debug("Resolving %s failed", key, exc_info=True)
    return []


async def _value_candidates(
    kind: ValueKind,
    prefix: str,
    resolver: ValueResolver,
    timeout: float,
    log: logging.Logger,
) -> list[CompletionCandidate]:
    match kind:
        case Choices(values=values):
            return [CompletionCandidate(value) for value in values if value.startswith(prefix)]
        case Dynamic(key=key):
            return [c for c in await _resolve(resolver, key, timeout, log) if c.value.startswith(prefix)]
        case NoValue() | FreeText():
            return []


def _dedupe(candidates: list[CompletionCandidate]) -> list[CompletionCandidate]:
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        if candidate.value not in seen:
            seen.add(candidate.value)
            unique.append(candidate)
    return unique


async def _complete(
    tree: CommandTree,
    request: CompletionRequest,
    resolver: ValueResolver,
    timeout: float,
    log: logging.Logger,
) -> list[CompletionCandidate]:
    tokens = request.tokens
    if not tokens:
        # still typing the program name
        return []
    ctx = _walk(tree, tokens[1:])
    current = request.current
    log.debug("Completing %r at %s (stopped=%s)", current, ctx.node.name, ctx.stopped)

    if current.startswith("-"):
        return _dedupe(_flag_candidates(ctx, current))

    if ctx.pending_flag is not None:
        return _dedupe(await _value_candidates(ctx.pending_flag.kind, current, resolver, timeout, log))

    candidates = []
    if not ctx.stopped:
        candidates.extend(
            CompletionCandidate(child.name, child.short_help) for child in ctx.node.children if child.name.startswith(current)
        )
    if ctx.positional_count < len(ctx.node.positionals):
        positional = ctx.node.positionals[ctx.positional_count]
        candidates.extend(await _value_candidates(positional.kind, current, resolver, timeout, log))
    return _dedupe(candidates)


async def complete(
    tree: CommandTree,
    request: CompletionRequest,
    resolver: ValueResolver,
    timeout: float = RESOLVE_TIMEOUT,
) -> list[CompletionCandidate]:
    """Compute the candidates for the word under the cursor.

    Matching is a case-sensitive prefix test; candidates keep declaration
    order (or resolver order for dynamic values) with duplicates dropped.

    Args:
        tree: The command tree
        request: The partial command line
        resolver: Source of dynamic values
        timeout: Maximum wait (seconds) for the resolver

    Returns:
        The ordered candidates, empty when nothing applies or on any error
    """
    log = get_logger("completion")
    try:
        return await _complete(tree, request, resolver, timeout, log)
    except Exception:  # pylint: disable=W0718
        log.debug("Completion failed for %r", request.text, exc_info=True)
        return []
