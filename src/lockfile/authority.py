"""Read-only view over the packages recorded in an upstream lock file."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from constants import Constants
from .constraints import version_satisfies
from .models import Package


class LockAuthority:
    """Frozen package universe with a provider index for virtual names.

    Lookups are pure: the authority never changes after construction.
    """

    def __init__(self, packages: Iterable[Package]):
        self._packages: List[Package] = list(packages)
        self._by_name: Dict[str, List[Package]] = {}
        self._providers: Dict[str, List[str]] = {}

        for package in self._packages:
            self._by_name.setdefault(package.name, []).append(package)
            for link in package.provides:
                providers = self._providers.setdefault(link.target, [])
                if package.name not in providers:
                    providers.append(package.name)

    @property
    def packages(self) -> List[Package]:
        """All locked packages in lock file order."""
        return list(self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    def find_package(self, name: str, constraint: str = Constants.ANY_CONSTRAINT) -> Optional[Package]:
        """Return the locked package called ``name`` whose version satisfies ``constraint``."""
        for package in self._by_name.get(name.lower(), ()):
            if version_satisfies(package.version, constraint):
                return package
        return None

    def get_providers(self, name: str) -> List[str]:
        """Names of locked packages declaring that they provide ``name``."""
        return list(self._providers.get(name.lower(), ()))
