"""Overlay of an upstream lock file onto the packages offered to the solver."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional

from cli_config import OverlayConfig
from common.logging_utils import safe_url
from constants import Constants
from lockfile.authority import LockAuthority
from lockfile.loader import load_lock_authority
from lockfile.models import Package
from .infrastructure import is_infrastructure_package
from .package_set import PinnedPackageSet
from .pinner import pin_dependency_closure
from .pool import PrePoolCreateEvent

logger = logging.getLogger(__name__)

AuthorityLoader = Callable[[str, bool], LockAuthority]


def filter_requires(requires: Dict[str, str]) -> Dict[str, str]:
    """Drop platform requirements, keeping request order."""
    return {
        name: constraint
        for name, constraint in requires.items()
        if not is_infrastructure_package(name)
    }


def apply_overlay(
    authority: LockAuthority,
    candidates: Iterable[Package],
    requires: Dict[str, str],
    root_packages: Iterable[Package],
) -> List[Package]:
    """Return the candidate list with every upstream-locked package pinned.

    Root and platform packages are kept as they are. Every other candidate
    name found in the lock is pinned to the locked version; names the lock
    does not know keep all their pool options. Requested packages the lock
    satisfies are then pinned together with their dependency closure.
    """
    packages = PinnedPackageSet(root_packages)
    root_names = {package.name for package in packages}

    for candidate in candidates:
        # A decision for this name has already been made.
        if candidate.name in packages:
            continue

        locked = authority.find_package(candidate.name, Constants.ANY_CONSTRAINT)
        if locked is not None:
            packages.set(locked.name, locked)
            continue

        # Not managed upstream, so every option stays available to the solver.
        packages.append_option(candidate)

    for name, constraint in requires.items():
        # Root and platform packages are never replaced.
        if name.lower() in root_names:
            continue
        locked = authority.find_package(name, constraint)
        if locked is None:
            continue
        logger.info("Locking package %s to %s based on upstream lock file.", name, locked.version)
        packages.set(name, locked)
        pin_dependency_closure(authority, locked, packages)

    return packages.to_list()


class OverlayEngine:
    """Hook run when the host is about to create its resolution pool."""

    def __init__(self, config: OverlayConfig, authority_loader: Optional[AuthorityLoader] = None):
        self.config = config
        self.authority_loader = authority_loader or load_lock_authority

    def limit_allowed_package_versions(self, event: PrePoolCreateEvent) -> List[Package]:
        """Return the package list the solver should use for this event.

        Raises:
            LockSourceError: the upstream lock file could not be loaded.
            LockInconsistencyError, InternalConsistencyError: the upstream lock
                cannot satisfy a locked package's requirements.
        """
        if not self.config.enabled:
            logger.info("No upstream lock file specified, skipped constraining versions.")
            logger.info(
                "Specify an upstream lock file by specifying the `%s` environment variable.",
                Constants.ENV_LOCK_FILE,
            )
            return list(event.packages)

        # Nothing requested means installing from an existing lock file.
        requires = filter_requires(event.requires)
        if not requires:
            logger.info(
                "Installing from existing lock file, skipped constraining versions "
                "from an upstream lock file."
            )
            return list(event.packages)

        lock_file = self.config.lock_file
        logger.info(
            "Using upstream lock file '%s' to lock versions for known packages.", safe_url(lock_file)
        )
        authority = self.authority_loader(lock_file, self.config.allow_http)

        return apply_overlay(authority, event.packages, requires, event.root_packages())
