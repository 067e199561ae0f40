"""Shared constants for jenkins-cli."""

import os
from pathlib import Path

from .models import Shell

__all__ = [
    "COMPLETION_PATH_CHOICES",
    "CONFIG_FILE",
    "DEFAULT_COMPLETION_PATHS",
    "HIDDEN_COMPLETE_COMMAND",
    "PROFILE_NAMES_KEY",
    "JOB_ALIASES_KEY",
    "PROG_NAME",
    "RESOLVE_TIMEOUT",
    "SUPPORTED_SHELLS",
]

PROG_NAME = "jenkins"

# Internal invocation used by the generated scripts, never listed in help
HIDDEN_COMPLETE_COMMAND = "__complete"

# Config file path - use XDG_CONFIG_HOME with fallback to ~/.config
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = Path(os.environ.get("JENKINS_CLI_CONFIG") or _xdg_config_home / "jenkins-cli" / "config.toml")

# Supported shells for completion generation, in help order
SUPPORTED_SHELLS = tuple(shell.value for shell in Shell)

# Second positional of `completion`: install location
COMPLETION_PATH_CHOICES = ("default",)

# Default user-level completion paths
DEFAULT_COMPLETION_PATHS = {
    Shell.BASH: "~/.local/share/bash-completion/completions/jenkins",
    Shell.ZSH: "~/.zsh/completions/_jenkins",
    Shell.FISH: "~/.config/fish/completions/jenkins.fish",
    Shell.POWERSHELL: "~/.config/powershell/completions/jenkins.ps1",
}

# Dynamic value keys served by the configuration resolver
PROFILE_NAMES_KEY = "config-profile-names"
JOB_ALIASES_KEY = "job-aliases"

# Upper bound (seconds) for a dynamic lookup during interactive completion
RESOLVE_TIMEOUT = float(os.environ.get("JENKINS_CLI_COMPLETE_TIMEOUT") or 1.5)
