"""Logging setup and debug mode state."""

import logging
import os

from .ansi import LogStyles, make_style, should_colorize

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
]


class _DebugState:
    """Mutable debug flag, initialized from the DEBUG environment variable."""

    value: bool = bool(os.environ.get("DEBUG"))


def is_debug() -> bool:
    """Return the current debug state."""
    return _DebugState.value


def set_debug(value: bool) -> None:
    """Set the debug state."""
    _DebugState.value = value


class LogObjects:
    """Handlers shared by every logger."""

    handlers: list[logging.Handler] = []


class ScreenLogFormatter(logging.Formatter):
    """Terminal formatter, colored by level when the terminal allows it."""

    def __init__(self) -> None:
        super().__init__()
        fmt = r"%(name)15s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        colored = should_colorize()
        self._formatters = {}
        for level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL):
            codes = getattr(LogStyles, logging.getLevelName(level), ())
            prefix, suffix = make_style(*codes) if colored and codes else ("", "")
            self._formatters[level] = logging.Formatter(prefix + fmt + suffix)

    def format(self, record: logging.LogRecord) -> str:
        return self._formatters.get(record.levelno, self._formatters[logging.INFO]).format(record)


def init_logger(filename: str | None = None, force_debug: bool = False, quiet: bool = False) -> None:
    """Initialize the logging system.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
        quiet: Only show warnings and errors on the terminal, whatever the debug state
    """
    if force_debug:
        set_debug(True)

    LogObjects.handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter())
    if quiet:
        stream_handler.setLevel(logging.WARNING)
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "jenkins", level: int | None = None) -> logging.Logger:
    """Return a named logger.

    Args:
        name (str): logger's name
        level (int): logger's level (auto if not set)

    Returns:
        The logger instance
    """
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    # handlers replaced by a later init_logger() call
    for handler in list(logger.handlers):
        if handler not in LogObjects.handlers:
            logger.removeHandler(handler)
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" initialized', name)
    return logger
