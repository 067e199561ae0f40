"""Tests for terminal styling and the screen log formatter."""

import logging
import os
from io import StringIO
from unittest.mock import patch

from jenkins_cli.ansi import BOLD, CYAN, RED, RESET, YELLOW, HelpStyles, colorize, make_style, should_colorize
from jenkins_cli.help import get_command_help, get_help
from jenkins_cli.logging_setup import ScreenLogFormatter


class _Tty(StringIO):
    def isatty(self):
        return True


def test_colorize():
    assert colorize("jenkins", RED) == "\x1b[31mjenkins\x1b[0m"
    assert colorize("jenkins", RED, BOLD) == "\x1b[31;1mjenkins\x1b[0m"
    assert colorize("jenkins") == "jenkins"


def test_make_style():
    assert make_style(YELLOW) == ("\x1b[33m", RESET)
    assert make_style() == ("", RESET)


def test_no_color_wins():
    """NO_COLOR disables colors even on a terminal with FORCE_COLOR."""
    with patch.dict(os.environ, {"NO_COLOR": "1", "FORCE_COLOR": "1"}):
        assert should_colorize(_Tty()) is False


def test_force_color():
    with patch.dict(os.environ, {"FORCE_COLOR": "1", "NO_COLOR": ""}):
        assert should_colorize(StringIO()) is True


def test_tty_detection():
    with patch.dict(os.environ, {"NO_COLOR": "", "FORCE_COLOR": ""}):
        assert should_colorize(StringIO()) is False
        assert should_colorize(_Tty()) is True
        assert should_colorize(object()) is False


def test_help_colors(tree):
    plain = get_help(tree)
    colored = get_help(tree, color=True)
    assert "\x1b[" not in plain
    assert colorize("Available commands:", *HelpStyles.HEADING) in colored
    assert colorize(f"{'config':12s}", CYAN) in colored


def test_command_help_colors(tree):
    colored = get_command_help(tree, ("logs",), color=True)
    assert colorize("Options:", *HelpStyles.HEADING) in colored
    assert colorize(f"{'-f, --follow':24s}", *HelpStyles.OPTION) in colored


def test_screen_formatter_levels():
    with patch.dict(os.environ, {"FORCE_COLOR": "1", "NO_COLOR": ""}):
        formatter = ScreenLogFormatter()
    record = logging.LogRecord("t", logging.ERROR, __file__, 1, "broken", None, None)
    assert formatter.format(record).startswith("\x1b[31;2m")
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "fine", None, None)
    assert not formatter.format(record).startswith("\x1b[")
