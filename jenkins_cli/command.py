"""jenkins - command line client for Jenkins.

This entry point serves the help, the `completion` command and the hidden
`__complete` requests made by the generated completion scripts.
"""

import asyncio
import os
import sys
from pathlib import Path
from typing import NoReturn

from jenkins_cli.ansi import should_colorize
from jenkins_cli.commands.discovery import get_command_tree
from jenkins_cli.commands.tree import CommandTree
from jenkins_cli.completions import ConfigResolver, handle_complete_request, handle_completion
from jenkins_cli.constants import HIDDEN_COMPLETE_COMMAND
from jenkins_cli.help import get_command_help, get_help
from jenkins_cli.logging_setup import get_logger, init_logger
from jenkins_cli.models import CliError, ExitCode

__all__ = ["main", "run_command", "run_hidden_complete"]

_HELP_FLAGS = {"-h", "--help"}


def use_param(txt: str, args: list[str]) -> str:
    """Check if parameter `txt` is in args.

    if found, removes it from args & returns the argument value
    """
    v = ""
    if txt in args:
        i = args.index(txt)
        if i + 1 < len(args):
            v = args[i + 1]
            del args[i : i + 2]
    return v


def _command_path(tree: CommandTree, args: list[str]) -> tuple[str, ...]:
    """Leading words of `args` naming a command."""
    path: list[str] = []
    node = tree.root
    for word in args:
        child = node.child(word)
        if child is None:
            break
        path.append(word)
        node = child
    return tuple(path)


def _config_from_line(args: list[str]) -> Path | None:
    """Configuration file named by --config in the line being completed."""
    if len(args) < 2:
        return None
    value = use_param("--config", args[1].split())
    return Path(value).expanduser() if value else None


async def _answer_hidden_complete(args: list[str]) -> str:
    """Candidates for a generated script; never fails."""
    log = get_logger("completion")
    try:
        resolver = ConfigResolver(_config_from_line(args))
        return await handle_complete_request(get_command_tree(), args, resolver)
    except Exception:  # pylint: disable=W0718
        log.debug("Completion request failed", exc_info=True)
        return ""


def run_hidden_complete(args: list[str]) -> NoReturn:
    """Answer a generated script and end the process with status 0.

    A configuration read abandoned after the resolver timeout may still block
    an executor thread (a FIFO, a hung network mount). The loop is closed
    without waiting for that thread and the process leaves through `os._exit`,
    after flushing the output.

    Args:
        args: The request, without the hidden command name
    """
    loop = asyncio.new_event_loop()
    try:
        output = loop.run_until_complete(_answer_hidden_complete(args))
    except Exception:  # pylint: disable=W0718
        output = ""
    finally:
        loop.close()
    sys.stdout.write(output)
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(ExitCode.SUCCESS)


async def run_command(args: list[str], config_file: Path | None = None) -> ExitCode:
    """Run the command described by `args`.

    Args:
        args: Command line arguments, without the program name and global options
        config_file: Configuration file override

    Returns:
        The process exit code

    Raises:
        CliError: If the command cannot be run
    """
    tree = get_command_tree()
    if not args:
        sys.stderr.write(get_help(tree, should_colorize(sys.stderr)))
        return ExitCode.USAGE_ERROR
    if args[0] in _HELP_FLAGS or args[0] == "help":
        sys.stdout.write(get_help(tree, should_colorize(sys.stdout)))
        return ExitCode.SUCCESS

    path = _command_path(tree, args)
    if not path:
        msg = f"Unknown command: {args[0]}\nRun '{tree.program} --help' for available commands."
        raise CliError(msg, ExitCode.USAGE_ERROR)

    if _HELP_FLAGS.intersection(args[len(path) :]):
        sys.stdout.write(get_command_help(tree, path, should_colorize(sys.stdout)))
        return ExitCode.SUCCESS

    if path == ("completion",):
        output = handle_completion(tree, args[1:], get_logger("completion"))
        sys.stdout.write(output if output.endswith("\n") else f"{output}\n")
        return ExitCode.SUCCESS

    node = tree.find(path)
    if node is not None and node.children:
        sys.stderr.write(get_command_help(tree, path, should_colorize(sys.stderr)))
        return ExitCode.USAGE_ERROR

    msg = f"'{' '.join(path)}' is not available in this build"
    raise CliError(msg, ExitCode.COMMAND_ERROR)


def main() -> None:
    """Run the command."""
    args = sys.argv[1:]
    if args and args[0] == HIDDEN_COMPLETE_COMMAND:
        init_logger(quiet=True)
        run_hidden_complete(args[1:])

    debug_flag = use_param("--debug", args)
    if debug_flag:
        init_logger(filename=debug_flag, force_debug=True)
    else:
        init_logger()
    log = get_logger("startup")

    config_override = use_param("--config", args)
    config_file = Path(config_override).expanduser() if config_override else None

    try:
        exit_code = asyncio.run(run_command(args, config_file))
    except KeyboardInterrupt:
        exit_code = ExitCode.COMMAND_ERROR
    except CliError as e:
        log.error("%s", e)
        exit_code = e.exit_code
    except Exception:  # pylint: disable=W0718
        log.critical("Unhandled exception:", exc_info=True)
        exit_code = ExitCode.COMMAND_ERROR
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
