"""Shared enumerations and exceptions."""

from enum import IntEnum, StrEnum

__all__ = ["CliError", "ExitCode", "Shell"]


class ExitCode(IntEnum):
    """Standard exit codes for the jenkins client."""

    SUCCESS = 0
    USAGE_ERROR = 1  # Unknown command, invalid arguments
    COMMAND_ERROR = 2  # Command execution failed


class CliError(Exception):
    """Used for errors which already have a user-facing message."""

    def __init__(self, message: str, exit_code: ExitCode = ExitCode.COMMAND_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class Shell(StrEnum):
    """Shells a completion script can be generated for."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "powershell"
