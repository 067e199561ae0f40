"""Terminal styling for log lines and help output.

Colors are only emitted when the target stream is a terminal, unless
NO_COLOR or FORCE_COLOR say otherwise.
"""

import os
import sys
from typing import TextIO

__all__ = [
    "BOLD",
    "CYAN",
    "DIM",
    "RED",
    "RESET",
    "YELLOW",
    "HelpStyles",
    "LogStyles",
    "colorize",
    "make_style",
    "should_colorize",
]

_CSI = "\x1b["

RESET = f"{_CSI}0m"

BOLD = "1"
DIM = "2"
RED = "31"
YELLOW = "33"
CYAN = "36"


def should_colorize(stream: TextIO | None = None) -> bool:
    """Tell whether escape sequences may be written to `stream`.

    NO_COLOR wins over FORCE_COLOR, which wins over TTY detection.

    Args:
        stream: The output stream, sys.stderr by default

    Returns:
        True if colors should be used
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    target = sys.stderr if stream is None else stream
    isatty = getattr(target, "isatty", None)
    return bool(isatty and isatty())


def make_style(*codes: str) -> tuple[str, str]:
    """Return the (prefix, suffix) escape sequences for `codes`."""
    prefix = f"{_CSI}{';'.join(codes)}m" if codes else ""
    return prefix, RESET


def colorize(text: str, *codes: str) -> str:
    """Wrap `text` in the escape sequences of `codes`, unchanged without codes."""
    if not codes:
        return text
    prefix, suffix = make_style(*codes)
    return f"{prefix}{text}{suffix}"


class LogStyles:
    """Styles of the screen log levels."""

    WARNING = (YELLOW, DIM)
    ERROR = (RED, DIM)
    CRITICAL = (RED, BOLD)


class HelpStyles:
    """Styles of the help text."""

    HEADING = (BOLD,)
    COMMAND = (CYAN,)
    OPTION = (YELLOW,)
