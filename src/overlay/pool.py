"""Host boundary types describing a resolution pool about to be created."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from constants import RepositoryKinds
from lockfile.models import Package

logger = logging.getLogger(__name__)


@dataclass
class Repository:
    """A repository contributing candidate packages to the pool."""
    kind: RepositoryKinds
    packages: List[Package] = field(default_factory=list)


@dataclass
class PrePoolCreateEvent:
    """Inputs handed to the overlay before the host builds its pool.

    ``requires`` maps requested package names to constraints in request order.
    """
    requires: Dict[str, str]
    repositories: List[Repository]
    packages: List[Package]

    def root_packages(self) -> List[Package]:
        """Packages from root and platform repositories, in repository order."""
        seeds: List[Package] = []
        for repository in self.repositories:
            if repository.kind in (RepositoryKinds.ROOT, RepositoryKinds.PLATFORM):
                seeds.extend(repository.packages)
        return seeds


def _packages(entries: Any) -> List[Package]:
    if not isinstance(entries, list):
        raise ValueError("package list must be a JSON array")
    if not all(isinstance(entry, dict) for entry in entries):
        raise ValueError("package entries must be JSON objects")
    return [Package.from_dict(entry) for entry in entries]


def event_from_dict(data: Dict[str, Any]) -> PrePoolCreateEvent:
    """Build an event from a decoded pool description.

    Raises:
        ValueError: on unknown repository kinds or malformed entries.
    """
    requires = data.get("requires") or {}
    if not isinstance(requires, dict):
        raise ValueError("'requires' must be a JSON object")

    repositories = []
    for entry in data.get("repositories") or []:
        if not isinstance(entry, dict):
            raise ValueError("repository entries must be JSON objects")
        kind = RepositoryKinds(str(entry.get("type", RepositoryKinds.PACKAGE.value)).lower())
        repositories.append(Repository(kind=kind, packages=_packages(entry.get("packages") or [])))

    return PrePoolCreateEvent(
        requires={str(name).lower(): str(constraint or "*") for name, constraint in requires.items()},
        repositories=repositories,
        packages=_packages(data.get("packages") or []),
    )


def load_pool_event(path: str) -> PrePoolCreateEvent:
    """Read a JSON pool description from ``path``.

    Raises:
        FileNotFoundError, IOError: the file cannot be read.
        ValueError: the content is not a valid pool description.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("pool description must be a JSON object")
    event = event_from_dict(data)
    logger.debug(
        "Pool loaded: %d requirements, %d repositories, %d candidates",
        len(event.requires), len(event.repositories), len(event.packages),
    )
    return event
