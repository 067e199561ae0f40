"""Command declaration discovery.

Turns the declared command docstrings and flags into a typed command tree.
"""

from __future__ import annotations

from ..builtin_commands import COMMAND_FLAGS, COMMANDS, PROGRAM_DOC, PROGRAM_FLAGS
from ..constants import COMPLETION_PATH_CHOICES, JOB_ALIASES_KEY, PROFILE_NAMES_KEY, PROG_NAME, SUPPORTED_SHELLS
from .models import Choices, CommandArg, CommandInfo, Dynamic, FlagSpec, FreeText, ValueKind
from .parsing import parse_docstring
from .tree import CommandTree, build_command_tree

__all__ = ["classify_arg", "get_all_commands", "get_command_tree", "get_program_info"]

# Commands whose [name] argument is an existing configuration name
PROFILE_COMMANDS = {("config", "remove"), ("config", "use"), ("config", "show")}

# Commands accepting a job alias in place of a job name
JOB_COMMANDS = {("build",), ("status",), ("logs",), ("open",)}

# Commands whose [alias] argument is an existing alias
ALIAS_COMMANDS = {("alias", "remove")}

# Known static completions for specific arg names
KNOWN_COMPLETIONS: dict[str, tuple[str, ...]] = {
    "shell": SUPPORTED_SHELLS,
    "path": COMPLETION_PATH_CHOICES,
}


def classify_arg(path: tuple[str, ...], arg: CommandArg) -> ValueKind:
    """Classify a docstring argument into the kind of values it accepts.

    Args:
        path: The command path (e.g. ("config", "use"))
        arg: The argument parsed from the docstring

    Returns:
        The ValueKind used for completion
    """
    # Check for pipe-separated choices
    if "|" in arg.value:
        return Choices(tuple(choice for choice in arg.value.split("|") if choice))

    if arg.value == "name" and path in PROFILE_COMMANDS:
        return Dynamic(PROFILE_NAMES_KEY)

    if (arg.value == "job_name" and path in JOB_COMMANDS) or (arg.value == "alias" and path in ALIAS_COMMANDS):
        return Dynamic(JOB_ALIASES_KEY)

    if arg.value in KNOWN_COMPLETIONS:
        return Choices(KNOWN_COMPLETIONS[arg.value])

    # Default: nothing to offer, the arg name is a hint
    return FreeText(hint=arg.value)


def get_all_commands(
    declarations: dict[str, str] | None = None,
    flags: dict[str, list[FlagSpec]] | None = None,
) -> dict[str, CommandInfo]:
    """Parse command declarations into CommandInfo objects.

    Args:
        declarations: Command name -> docstring, the built-in commands by default
        flags: Command name -> accepted flags, the built-in flags by default

    Returns:
        Dict mapping command name to CommandInfo, in declaration order
    """
    if declarations is None:
        declarations = COMMANDS
    if flags is None:
        flags = COMMAND_FLAGS

    commands: dict[str, CommandInfo] = {}
    for name, doc in declarations.items():
        args, short_desc, full_desc = parse_docstring(doc)
        commands[name] = CommandInfo(
            name=name,
            args=args,
            short_description=short_desc,
            full_description=full_desc,
            flags=list(flags.get(name, [])),
        )

    unknown = set(flags) - set(declarations)
    if unknown:
        msg = f"Flags declared for unknown commands: {', '.join(sorted(unknown))}"
        raise ValueError(msg)
    return commands


def get_program_info(program: str = PROG_NAME) -> CommandInfo:
    """Help and global flags of the program, used as the tree root."""
    _args, short_desc, full_desc = parse_docstring(PROGRAM_DOC)
    return CommandInfo(
        name=program,
        args=[],
        short_description=short_desc,
        full_description=full_desc,
        flags=list(PROGRAM_FLAGS),
    )


def get_command_tree(program: str = PROG_NAME) -> CommandTree:
    """Build the command tree of the built-in commands.

    Args:
        program: The program name completions are registered for

    Returns:
        The validated command tree
    """
    return build_command_tree(program, get_all_commands(), classify_arg, root=get_program_info(program))
