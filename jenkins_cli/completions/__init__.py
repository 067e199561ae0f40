"""Shell completion for jenkins.

Static scripts are generated from the command tree; values only known at run
time (configuration names, job aliases) are requested by those scripts through
the hidden `__complete` command.

This package provides:
- The completion engine and its dynamic value resolvers
- Shell-specific completion script generators (bash, zsh, fish, powershell)
- CLI handlers for `jenkins completion` and `jenkins __complete`
"""

from __future__ import annotations

from .engine import complete
from .generators import GENERATORS
from .handlers import get_default_path, handle_completion
from .models import CompletionCandidate, CompletionRequest
from .protocol import format_candidates, handle_complete_request
from .resolver import ConfigResolver, StaticResolver, ValueResolver

__all__ = [
    "GENERATORS",
    "CompletionCandidate",
    "CompletionRequest",
    "ConfigResolver",
    "StaticResolver",
    "ValueResolver",
    "complete",
    "format_candidates",
    "get_default_path",
    "handle_complete_request",
    "handle_completion",
]
