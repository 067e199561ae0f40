"""Tests for the hidden completion request."""

import pytest

from jenkins_cli.completions import CompletionCandidate, format_candidates, handle_complete_request
from jenkins_cli.models import Shell

CANDIDATES = [
    CompletionCandidate("prod", "https://jenkins.example.com (current)"),
    CompletionCandidate("team:deploy", "deploy\npipeline"),
    CompletionCandidate("bare"),
]


class TestFormatCandidates:
    """One line per candidate in the shell's format."""

    def test_bash(self):
        assert format_candidates(Shell.BASH, CANDIDATES) == "prod\nteam:deploy\nbare\n"

    def test_zsh(self):
        assert format_candidates(Shell.ZSH, CANDIDATES) == (
            "prod:https://jenkins.example.com (current)\nteam\\:deploy:deploy pipeline\nbare\n"
        )

    @pytest.mark.parametrize("shell", [Shell.FISH, Shell.POWERSHELL])
    def test_tab_separated(self, shell):
        assert format_candidates(shell, CANDIDATES) == (
            "prod\thttps://jenkins.example.com (current)\nteam:deploy\tdeploy pipeline\nbare\n"
        )

    def test_empty(self):
        assert format_candidates(Shell.BASH, []) == ""


class TestHandleCompleteRequest:
    """Answering the generated scripts."""

    @pytest.mark.asyncio
    async def test_bash(self, tree, resolver):
        assert await handle_complete_request(tree, ["bash", "jenkins conf"], resolver) == "config\n"

    @pytest.mark.asyncio
    async def test_fish_descriptions(self, tree, resolver):
        output = await handle_complete_request(tree, ["fish", "jenkins config "], resolver)
        assert output.splitlines()[0] == "add\tAdd a new Jenkins host"
        assert len(output.splitlines()) == 5

    @pytest.mark.asyncio
    async def test_zsh_dynamic(self, tree, resolver):
        output = await handle_complete_request(tree, ["zsh", "jenkins config use "], resolver)
        assert output == "prod:https://jenkins.example.com (current)\ndev:https://dev.example.com\n"

    @pytest.mark.asyncio
    async def test_cursor(self, tree, resolver):
        output = await handle_complete_request(tree, ["powershell", "jenkins completion fish", "20"], resolver)
        assert output == "fish\n"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "args",
        [
            [],
            ["bash"],
            ["tcsh", "jenkins "],
            ["bash", "jenkins ", "99"],
            ["bash", "jenkins ", "end"],
            ["bash", "jenkins ", "1", "extra"],
        ],
    )
    async def test_malformed(self, tree, resolver, args):
        assert await handle_complete_request(tree, args, resolver) == ""
