" generic fixtures "
from pathlib import Path

import pytest

from jenkins_cli.commands.discovery import get_command_tree
from jenkins_cli.commands.tree import CommandTree
from jenkins_cli.completions import CompletionCandidate, StaticResolver
from jenkins_cli.constants import JOB_ALIASES_KEY, PROFILE_NAMES_KEY

SAMPLE_CONFIG = """\
current = "prod"

[jenkins.prod]
host = "https://jenkins.example.com"
user = "me"
token = "secret"

[jenkins.dev]
host = "https://dev.example.com"
user = "me"
token = "secret"

[job_aliases]
deploy = "team/deploy-pipeline"
nightly = { job_name = "qa/nightly", jenkins = "dev" }
"""


def pytest_configure():
    "Runs once before all"
    from jenkins_cli.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture(scope="session")
def tree() -> CommandTree:
    "The built-in command tree"
    return get_command_tree()


@pytest.fixture
def resolver() -> StaticResolver:
    "Fixed profile names and job aliases"
    return StaticResolver(
        {
            PROFILE_NAMES_KEY: [
                CompletionCandidate("prod", "https://jenkins.example.com (current)"),
                CompletionCandidate("dev", "https://dev.example.com"),
            ],
            JOB_ALIASES_KEY: ["deploy", "nightly"],
        }
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    "A configuration store with two hosts and two aliases"
    path = tmp_path / "config.toml"
    path.write_text(SAMPLE_CONFIG)
    return path
