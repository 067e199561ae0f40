"""CLI handler for the `jenkins completion` command."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from ..constants import DEFAULT_COMPLETION_PATHS, PROG_NAME, SUPPORTED_SHELLS
from ..models import CliError, ExitCode, Shell
from .generators import GENERATORS

if TYPE_CHECKING:
    import logging

    from ..commands.tree import CommandTree

__all__ = ["get_default_path", "get_install_instructions", "get_usage", "handle_completion"]


def get_default_path(shell: Shell) -> str:
    """Get the default user-level completion path for a shell.

    Args:
        shell: Shell type

    Returns:
        Expanded absolute path to the default completion file
    """
    return os.path.expanduser(DEFAULT_COMPLETION_PATHS[shell])


def get_install_instructions(shell: Shell, program: str = PROG_NAME) -> str:
    """How to load the completions printed on stdout."""
    match shell:
        case Shell.BASH:
            return f'Add to ~/.bashrc:\n  eval "$({program} completion bash)"'
        case Shell.ZSH:
            return f'Add to ~/.zshrc (after compinit):\n  eval "$({program} completion zsh)"'
        case Shell.FISH:
            return f"Add to ~/.config/fish/config.fish:\n  {program} completion fish | source"
        case Shell.POWERSHELL:
            return f"Add to your PowerShell profile:\n  {program} completion powershell | Out-String | Invoke-Expression"


def get_usage(program: str = PROG_NAME) -> str:
    """Usage text of the completion command, with one example per shell."""
    lines = [f"Usage: {program} completion <{'|'.join(SUPPORTED_SHELLS)}> [default|path]", ""]
    for shell in Shell:
        lines.append(get_install_instructions(shell, program))
    return "\n".join(lines)


def _get_success_message(shell: Shell, output_path: str, used_default: bool) -> str:
    """Generate a friendly success message after installing completions.

    Args:
        shell: Shell type
        output_path: Path where completions were written
        used_default: Whether the default path was used

    Returns:
        User-friendly success message
    """
    # Use ~ in display path for readability
    display_path = output_path.replace(os.path.expanduser("~"), "~")

    if not used_default:
        return f"Completions written to {display_path}"

    match shell:
        case Shell.BASH:
            return f"Completions installed to {display_path}\nReload your shell or run: source ~/.bashrc"
        case Shell.ZSH:
            return (
                f"Completions installed to {display_path}\n"
                "Ensure ~/.zsh/completions is in your fpath. Add to ~/.zshrc:\n"
                "  fpath=(~/.zsh/completions $fpath)\n"
                "  autoload -Uz compinit && compinit\n"
                "Then reload your shell."
            )
        case Shell.FISH:
            return f"Completions installed to {display_path}\nReload your shell or run: source ~/.config/fish/config.fish"
        case Shell.POWERSHELL:
            return f"Completions installed to {display_path}\nAdd to your PowerShell profile:\n  . {display_path}"


def parse_completion_args(args: list[str]) -> tuple[Shell, str | None]:
    """Parse and validate completion command arguments.

    Args:
        args: Arguments after "completion" (e.g., ["zsh"] or ["zsh", "default"])

    Returns:
        Tuple of (shell, path_arg or None)

    Raises:
        CliError: On a missing or unsupported shell, or a relative path
    """
    if not args:
        raise CliError(get_usage(), ExitCode.USAGE_ERROR)
    if len(args) > 2:
        msg = f"Unexpected argument: {args[2]}\n{get_usage()}"
        raise CliError(msg, ExitCode.USAGE_ERROR)

    if args[0] not in SUPPORTED_SHELLS:
        msg = f"Unsupported shell: {args[0]}. Supported: {', '.join(SUPPORTED_SHELLS)}"
        raise CliError(msg, ExitCode.USAGE_ERROR)
    shell = Shell(args[0])

    path_arg = args[1] if len(args) > 1 else None
    if path_arg is not None and path_arg != "default" and not path_arg.startswith(("/", "~")):
        msg = "Relative paths not supported. Use absolute path, ~/path, or 'default'."
        raise CliError(msg, ExitCode.USAGE_ERROR)

    return shell, path_arg


def handle_completion(tree: CommandTree, args: list[str], log: logging.Logger) -> str:
    """Handle the completion command with path semantics.

    Args:
        tree: The command tree
        args: Arguments after "completion" (e.g., ["zsh"] or ["zsh", "default"])
        log: Logger instance

    Returns:
        The script content without a path argument, a success message otherwise

    Raises:
        CliError: On invalid arguments or when the file cannot be written
    """
    shell, path_arg = parse_completion_args(args)
    content = GENERATORS[shell](tree)

    if path_arg is None:
        return content

    # Determine output path
    if path_arg == "default":
        output_path = get_default_path(shell)
        used_default = True
    else:
        output_path = os.path.expanduser(path_arg)
        used_default = False

    log.debug("Writing completions to: %s", output_path)

    try:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_text(content, encoding="utf-8")
    except OSError as e:
        msg = f"Failed to write completion file: {e}"
        raise CliError(msg) from e

    return _get_success_message(shell, output_path, used_default)
