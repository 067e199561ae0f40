"""Built-in command definitions for jenkins.

This module is separate to avoid circular imports between help.py and the
completion package.
"""

from jenkins_cli.commands.models import Dynamic, FlagSpec, FreeText
from jenkins_cli.constants import PROFILE_NAMES_KEY

__all__ = ["COMMAND_FLAGS", "COMMANDS", "PROGRAM_DOC", "PROGRAM_FLAGS"]

_JOB_HELP = "(optional - will prompt to select if not provided)"

PROGRAM_DOC = """A CLI tool for interacting with Jenkins

The configuration file defaults to $XDG_CONFIG_HOME/jenkins-cli/config.toml and can be
changed with --config or the JENKINS_CLI_CONFIG environment variable."""

# Global options, parsed before the command
PROGRAM_FLAGS: list[FlagSpec] = [
    FlagSpec("--config", help="Use another configuration file", kind=FreeText("file")),
    FlagSpec("--debug", help="Log debug messages to this file", kind=FreeText("file")),
]

# Declared commands, in the order they are offered.
# The first docstring line may start with <required> or [optional] arguments.
COMMANDS: dict[str, str] = {
    "config": "Manage Jenkins host configurations",
    "config add": """Add a new Jenkins host

Prompts for the host URL, the user name and the API token, then stores them
under a new configuration name.""",
    "config list": "List all configured Jenkins hosts",
    "config remove": "[name] Remove a Jenkins host",
    "config use": """[name] Set the current Jenkins host

The current host is used by every command that does not receive --jenkins.""",
    "config show": "[name] Show a Jenkins host configuration",
    "build": f"""[job_name] Trigger a build for a Jenkins job

The job name may be a job alias {_JOB_HELP}.""",
    "status": f"""[job_name] Check the status of a Jenkins job or build

The job name may be a job alias {_JOB_HELP}.""",
    "logs": f"""[job_name] View console logs for a build

The job name may be a job alias {_JOB_HELP}.""",
    "open": f"""[job_name] Open a Jenkins job or build in the browser

The job name may be a job alias {_JOB_HELP}.""",
    "completion": """<shell> [path] Generate shell completion scripts

Usage:
  jenkins completion <shell>          Print the script on stdout
  jenkins completion <shell> default  Install to the default user path
  jenkins completion <shell> <path>   Install to a custom path""",
    "alias": "Manage job aliases",
    "alias add": """[alias] [job_name] Add a job alias

Both values are prompted for when not provided.""",
    "alias list": "List all job aliases",
    "alias remove": "[alias] Remove a job alias",
}

_FOLLOW = FlagSpec("--follow", "-f", "Follow the build logs in real-time")
_BUILD = FlagSpec("--build", "-b", "Specific build number (defaults to last build)", FreeText("number"))
_JENKINS = FlagSpec("--jenkins", "-j", "Jenkins host to use instead of the current one", Dynamic(PROFILE_NAMES_KEY))

COMMAND_FLAGS: dict[str, list[FlagSpec]] = {
    "build": [FlagSpec("--follow", "-f", "Follow the build logs in real-time after triggering"), _JENKINS],
    "status": [_BUILD, _JENKINS],
    "logs": [_BUILD, _FOLLOW, _JENKINS],
    "open": [_BUILD, _JENKINS],
    "alias add": [FlagSpec("--jenkins", "-j", "Jenkins host the alias is bound to", Dynamic(PROFILE_NAMES_KEY))],
}
