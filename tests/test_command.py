"""Tests for the command line entry point and the completion command."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from jenkins_cli.command import main, use_param
from jenkins_cli.completions import get_default_path, handle_completion
from jenkins_cli.completions.handlers import parse_completion_args
from jenkins_cli.help import get_command_help, get_help
from jenkins_cli.logging_setup import get_logger
from jenkins_cli.models import CliError, ExitCode, Shell


def _main(monkeypatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["jenkins", *args])
    monkeypatch.setattr(os, "_exit", sys.exit)
    with pytest.raises(SystemExit) as exc:
        main()
    return exc.value.code


@pytest.fixture(autouse=True)
def _no_color(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


class TestCompletionCommand:
    """`jenkins completion <shell> [default|path]`."""

    @pytest.mark.parametrize("shell", ["bash", "zsh", "fish", "powershell"])
    def test_prints_script(self, monkeypatch, capsys, shell):
        assert _main(monkeypatch, "completion", shell) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert out.startswith("#") and out.endswith("\n")
        assert f"Generated by: jenkins completion {shell}" in out

    def test_unsupported_shell(self, monkeypatch, capsys):
        assert _main(monkeypatch, "completion", "tcsh") == ExitCode.USAGE_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Unsupported shell: tcsh. Supported: bash, zsh, fish, powershell" in captured.err

    def test_missing_shell(self, monkeypatch, capsys):
        assert _main(monkeypatch, "completion") == ExitCode.USAGE_ERROR
        err = capsys.readouterr().err
        assert "Usage: jenkins completion <bash|zsh|fish|powershell>" in err
        assert "jenkins completion fish | source" in err

    def test_relative_path(self, monkeypatch, capsys):
        assert _main(monkeypatch, "completion", "bash", "relative/file") == ExitCode.USAGE_ERROR
        assert "Relative paths not supported" in capsys.readouterr().err

    def test_install_to_path(self, monkeypatch, capsys, tmp_path):
        target = tmp_path / "nested" / "_jenkins"
        assert _main(monkeypatch, "completion", "zsh", str(target)) == ExitCode.SUCCESS
        assert target.read_text().startswith("#compdef jenkins")
        assert "Completions written to" in capsys.readouterr().out

    def test_help(self, monkeypatch, capsys):
        assert _main(monkeypatch, "completion", "--help") == ExitCode.SUCCESS
        assert "Usage: jenkins completion <shell> [path] [options]" in capsys.readouterr().out


class TestHandleCompletion:
    """The completion handler without the entry point."""

    def test_default_path(self, tree, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        message = handle_completion(tree, ["fish", "default"], get_logger("test"))
        assert (tmp_path / ".config" / "fish" / "completions" / "jenkins.fish").exists()
        assert "~/.config/fish/completions/jenkins.fish" in message

    def test_write_failure(self, tree, mocker, tmp_path):
        mocker.patch("pathlib.Path.write_text", side_effect=OSError("disk full"))
        with pytest.raises(CliError, match="disk full") as exc:
            handle_completion(tree, ["bash", str(tmp_path / "jenkins")], get_logger("test"))
        assert exc.value.exit_code == ExitCode.COMMAND_ERROR

    def test_parse_args(self):
        assert parse_completion_args(["zsh"]) == (Shell.ZSH, None)
        assert parse_completion_args(["bash", "~/x"]) == (Shell.BASH, "~/x")
        with pytest.raises(CliError, match="Unexpected argument: extra"):
            parse_completion_args(["bash", "default", "extra"])

    def test_default_paths(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        for shell in Shell:
            assert get_default_path(shell).startswith(str(tmp_path))
        assert get_default_path(Shell.ZSH).endswith("/_jenkins")


class TestHiddenComplete:
    """`jenkins __complete <shell> <line> [cursor]`."""

    def test_candidates(self, monkeypatch, capsys):
        assert _main(monkeypatch, "__complete", "bash", "jenkins conf") == ExitCode.SUCCESS
        assert capsys.readouterr().out == "config\n"

    def test_malformed_request_exits_0(self, monkeypatch, capsys):
        assert _main(monkeypatch, "__complete", "bash") == ExitCode.SUCCESS
        assert _main(monkeypatch, "__complete", "csh", "jenkins ") == ExitCode.SUCCESS
        assert capsys.readouterr().out == ""

    def test_reads_configuration(self, monkeypatch, capsys, config_file):
        monkeypatch.setattr("jenkins_cli.config.CONFIG_FILE", config_file)
        assert _main(monkeypatch, "__complete", "fish", "jenkins config use ") == ExitCode.SUCCESS
        assert capsys.readouterr().out == "prod\thttps://jenkins.example.com (current)\ndev\thttps://dev.example.com\n"

    def test_config_on_the_line(self, monkeypatch, capsys, config_file):
        line = f"jenkins --config {config_file} build "
        assert _main(monkeypatch, "__complete", "bash", line) == ExitCode.SUCCESS
        assert capsys.readouterr().out == "deploy\nnightly\n"

    def test_resolver_failure(self, monkeypatch, capsys, tmp_path):
        broken = tmp_path / "config.toml"
        broken.write_text("[[[")
        monkeypatch.setattr("jenkins_cli.config.CONFIG_FILE", broken)
        assert _main(monkeypatch, "__complete", "bash", "jenkins config use ") == ExitCode.SUCCESS
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


def _hidden_complete_process(config: Path, line: str) -> subprocess.CompletedProcess:
    env = {
        **os.environ,
        "JENKINS_CLI_CONFIG": str(config),
        "JENKINS_CLI_COMPLETE_TIMEOUT": "0.5",
        "PYTHONPATH": str(Path(__file__).parent.parent),
    }
    return subprocess.run(
        [sys.executable, "-m", "jenkins_cli", "__complete", "bash", line],
        capture_output=True,
        text=True,
        env=env,
        timeout=10,
        check=False,
    )


class TestHiddenCompleteProcess:
    """The hidden request as a real process."""

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs named pipes")
    def test_blocked_configuration_read(self, tmp_path):
        """A configuration read that never returns does not keep the process alive."""
        fifo = tmp_path / "config.toml"
        os.mkfifo(fifo)
        result = _hidden_complete_process(fifo, "jenkins config use ")
        assert result.returncode == ExitCode.SUCCESS
        assert result.stdout == ""

    def test_output_is_flushed(self, config_file):
        result = _hidden_complete_process(config_file, "jenkins config use ")
        assert result.returncode == ExitCode.SUCCESS
        assert result.stdout == "prod\ndev\n"


class TestMain:
    """Help, errors and exit codes."""

    def test_no_args(self, monkeypatch, capsys):
        assert _main(monkeypatch) == ExitCode.USAGE_ERROR
        assert "Available commands:" in capsys.readouterr().err

    @pytest.mark.parametrize("flag", ["--help", "-h", "help"])
    def test_help(self, monkeypatch, capsys, flag):
        assert _main(monkeypatch, flag) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert "config       <add|list|remove|use|show> Manage Jenkins host configurations" in out
        assert "__complete" not in out

    def test_command_help(self, monkeypatch, capsys):
        assert _main(monkeypatch, "config", "use", "-h") == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert "Usage: jenkins config use [name] [options]" in out
        assert "The current host is used by every command" in out

    def test_group_without_subcommand(self, monkeypatch, capsys):
        assert _main(monkeypatch, "alias") == ExitCode.USAGE_ERROR
        assert "Subcommands:" in capsys.readouterr().err

    def test_unknown_command(self, monkeypatch, capsys):
        assert _main(monkeypatch, "deploy") == ExitCode.USAGE_ERROR
        assert "Unknown command: deploy" in capsys.readouterr().err

    def test_unavailable_command(self, monkeypatch, capsys):
        assert _main(monkeypatch, "build", "team/job") == ExitCode.COMMAND_ERROR
        assert "'build' is not available in this build" in capsys.readouterr().err

    def test_global_options_are_removed(self, monkeypatch, capsys, tmp_path):
        log_file = tmp_path / "debug.log"
        assert _main(monkeypatch, "--debug", str(log_file), "--config", "x.toml", "completion", "bash") == 0
        assert "_jenkins()" in capsys.readouterr().out
        assert log_file.exists()

    def test_use_param(self):
        args = ["--config", "a.toml", "build"]
        assert use_param("--config", args) == "a.toml"
        assert args == ["build"]
        assert use_param("--config", ["--config"]) == ""


class TestHelp:
    """Help rendering."""

    def test_options(self, tree):
        text = get_command_help(tree, ("logs",))
        assert "-b, --build <number>" in text
        assert "-j, --jenkins <JENKINS>" in text
        assert "-h, --help" in text

    def test_unknown_path(self, tree):
        assert get_command_help(tree, ("nope",)).startswith("Unknown command: nope")

    def test_top_level(self, tree):
        text = get_help(tree)
        assert text.startswith("Syntax: jenkins <command> [options]")
        assert "completion   Generate shell completion scripts" in text