"""Dynamic value resolvers.

A resolver turns a `Dynamic` key into candidates at completion time. The
engine receives it as a parameter; resolvers never raise for unknown keys.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ..config import ConfigLoader, ConfigStore
from ..constants import JOB_ALIASES_KEY, PROFILE_NAMES_KEY
from ..logging_setup import get_logger
from ..models import CliError
from .models import CompletionCandidate

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigResolver", "StaticResolver", "ValueResolver"]


class ValueResolver(Protocol):
    """Anything able to list the values of a dynamic key."""

    async def resolve(self, key: str) -> list[CompletionCandidate]:
        """Return the candidates for `key`, in the order they should be offered."""


class StaticResolver:
    """Serves fixed candidate lists, strings or candidates, by key."""

    def __init__(self, values: Mapping[str, Iterable[CompletionCandidate | str]]) -> None:
        self.values = {
            key: [item if isinstance(item, CompletionCandidate) else CompletionCandidate(item) for item in items]
            for key, items in values.items()
        }

    async def resolve(self, key: str) -> list[CompletionCandidate]:
        return list(self.values.get(key, []))


def _profile_names(store: ConfigStore) -> list[CompletionCandidate]:
    candidates = []
    for name, settings in store.jenkins.items():
        description = settings.host
        if name == store.current:
            description += " (current)"
        candidates.append(CompletionCandidate(name, description))
    return candidates


def _job_aliases(store: ConfigStore) -> list[CompletionCandidate]:
    candidates = []
    for alias, target in store.job_aliases.items():
        description = target.job_name
        if target.jenkins:
            description += f" on {target.jenkins}"
        candidates.append(CompletionCandidate(alias, description))
    return candidates


class ConfigResolver:
    """Lists configuration names and job aliases from the configuration store."""

    providers: dict[str, Callable[[ConfigStore], list[CompletionCandidate]]] = {
        PROFILE_NAMES_KEY: _profile_names,
        JOB_ALIASES_KEY: _job_aliases,
    }

    def __init__(self, path: Path | None = None, log: logging.Logger | None = None) -> None:
        """Initialize the resolver.

        Args:
            path: Configuration file, the default location if not set
            log: Logger instance
        """
        self.log = log or get_logger("resolver")
        self.loader = ConfigLoader(self.log, path)

    async def resolve(self, key: str) -> list[CompletionCandidate]:
        """Return the candidates for `key`.

        Unknown keys and unreadable configurations give no candidates.

        Args:
            key: A dynamic value key

        Returns:
            The candidates, in configuration file order
        """
        provider = self.providers.get(key)
        if provider is None:
            self.log.debug("No provider for dynamic key %s", key)
            return []
        try:
            store = await self.loader.load()
        except CliError as e:
            self.log.debug("Cannot resolve %s: %s", key, e)
            return []
        return provider(store)
