"""Configuration store loading.

The store holds the configured Jenkins hosts and the job aliases:

    current = "prod"

    [jenkins.prod]
    host = "https://jenkins.example.com"
    user = "me"
    token = "..."

    [job_aliases]
    deploy = "team/deploy-pipeline"
    nightly = { job_name = "qa/nightly", jenkins = "dev" }
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiofiles
import aiofiles.os

from .constants import CONFIG_FILE
from .models import CliError

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader", "ConfigStore", "JenkinsHost", "JobAlias"]


@dataclass
class JenkinsHost:
    """Connection settings of a Jenkins server."""

    host: str
    user: str = ""
    token: str = ""


@dataclass
class JobAlias:
    """A short name for a job, optionally bound to a host."""

    job_name: str
    jenkins: str | None = None


@dataclass
class ConfigStore:
    """The parsed configuration, hosts and aliases in file order."""

    jenkins: dict[str, JenkinsHost] = field(default_factory=dict)
    current: str | None = None
    job_aliases: dict[str, JobAlias] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfigStore:
        """Build a store from the decoded TOML document.

        Args:
            data: The decoded document

        Returns:
            The configuration store

        Raises:
            ValueError: If a section has the wrong shape
        """
        hosts = data.get("jenkins", {})
        aliases = data.get("job_aliases", {})
        current = data.get("current")
        if not isinstance(hosts, dict) or not isinstance(aliases, dict):
            msg = "'jenkins' and 'job_aliases' must be tables"
            raise ValueError(msg)
        if current is not None and not isinstance(current, str):
            msg = "'current' must be a string"
            raise ValueError(msg)

        store = cls(current=current)
        for name, settings in hosts.items():
            if not isinstance(settings, dict) or not isinstance(settings.get("host"), str):
                msg = f"jenkins.{name} must be a table with a 'host' string"
                raise ValueError(msg)
            store.jenkins[name] = JenkinsHost(
                host=settings["host"],
                user=str(settings.get("user", "")),
                token=str(settings.get("token", "")),
            )
        for alias, target in aliases.items():
            if isinstance(target, str):
                store.job_aliases[alias] = JobAlias(job_name=target)
            elif isinstance(target, dict) and isinstance(target.get("job_name"), str):
                store.job_aliases[alias] = JobAlias(job_name=target["job_name"], jenkins=target.get("jenkins"))
            else:
                msg = f"job_aliases.{alias} must be a job name or a table with 'job_name'"
                raise ValueError(msg)
        return store


class ConfigLoader:
    """Loads the configuration store from its TOML file."""

    def __init__(self, log: logging.Logger, path: Path | None = None) -> None:
        """Initialize the config loader.

        Args:
            log: Logger instance for status and error messages
            path: Configuration file, CONFIG_FILE by default
        """
        self.log = log
        self.path = path or CONFIG_FILE

    async def load(self) -> ConfigStore:
        """Read and parse the configuration file.

        A missing file is an empty configuration.

        Returns:
            The configuration store

        Raises:
            CliError: If the file cannot be read or parsed
        """
        fname = Path(os.path.expandvars(str(self.path))).expanduser()
        if not await aiofiles.os.path.exists(fname):
            self.log.debug("No configuration at %s", fname)
            return ConfigStore()

        self.log.debug("Loading %s", fname)
        try:
            async with aiofiles.open(fname, "rb") as f:
                data = tomllib.loads((await f.read()).decode("utf-8"))
            return ConfigStore.from_dict(data)
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, ValueError) as e:
            msg = f"Problem reading {fname}: {e}"
            raise CliError(msg) from e
