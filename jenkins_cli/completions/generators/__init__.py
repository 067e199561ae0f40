"""Shell completion script generators.

Each generator turns the command tree into a self-registering script; the
output only depends on the tree.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from ...models import Shell
from .bash import generate_bash
from .fish import generate_fish
from .powershell import generate_powershell
from .zsh import generate_zsh

if TYPE_CHECKING:
    from ...commands.tree import CommandTree

__all__ = ["GENERATORS", "generate_bash", "generate_fish", "generate_powershell", "generate_zsh"]

GENERATORS: dict[Shell, Callable[[CommandTree], str]] = {
    Shell.BASH: generate_bash,
    Shell.ZSH: generate_zsh,
    Shell.FISH: generate_fish,
    Shell.POWERSHELL: generate_powershell,
}
