"""Ordered package collection used to accumulate overlay decisions."""

from __future__ import annotations

import itertools
from typing import Dict, Iterable, Iterator, List, Union

from lockfile.models import Package

_Key = Union[str, int]


class PinnedPackageSet:
    """Name-keyed packages interleaved with unkeyed package options.

    A keyed entry is a decision: the name is pinned to exactly that package.
    Unkeyed entries are options still left to the solver, and several may
    exist for one name. Iteration order is insertion order, which the solver
    uses as tie-break preference, so replacing an entry keeps its position.
    """

    def __init__(self, packages: Iterable[Package] = ()):
        self._entries: Dict[_Key, Package] = {}
        self._option_keys: Dict[str, List[int]] = {}
        self._option_ids = itertools.count()
        for package in packages:
            if package.name not in self:
                self.set(package.name, package)

    def __contains__(self, name: str) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __getitem__(self, name: str) -> Package:
        return self._entries[name.lower()]

    def __setitem__(self, name: str, package: Package) -> None:
        self.set(name, package)

    def __delitem__(self, name: str) -> None:
        self.remove(name)

    def __iter__(self) -> Iterator[Package]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._entries)

    def contains(self, name: str) -> bool:
        """True if ``name`` has been pinned. Unkeyed options do not count."""
        return name in self

    def get(self, name: str) -> Package:
        """Return the package pinned for ``name``; raises KeyError when absent."""
        return self[name]

    def set(self, name: str, package: Package) -> None:
        """Pin ``name`` to ``package``, replacing any earlier entry or options for it."""
        if not isinstance(package, Package):
            raise TypeError(f"expected Package for '{name}', got {type(package).__name__}")
        key = name.lower()

        option_keys = self._option_keys.pop(key, None)
        if not option_keys:
            self._entries[key] = package
            return

        # The pin takes the place of the first option it replaces.
        first, dropped = option_keys[0], set(option_keys)
        rebuilt: Dict[_Key, Package] = {}
        for k, p in self._entries.items():
            if k == first:
                rebuilt[key] = package
            elif k not in dropped:
                rebuilt[k] = p
        self._entries = rebuilt

    def remove(self, name: str) -> None:
        """Drop the pin and any options for ``name``. Missing names are ignored."""
        key = name.lower()
        self._entries.pop(key, None)
        for option_key in self._option_keys.pop(key, ()):
            del self._entries[option_key]

    def append_option(self, package: Package) -> None:
        """Keep ``package`` as one of possibly several undecided options for its name."""
        if not isinstance(package, Package):
            raise TypeError(f"expected Package option, got {type(package).__name__}")
        option_key = next(self._option_ids)
        self._entries[option_key] = package
        self._option_keys.setdefault(package.name, []).append(option_key)

    def options(self, name: str) -> List[Package]:
        """Unkeyed options currently held for ``name``."""
        return [self._entries[k] for k in self._option_keys.get(name.lower(), ())]

    def to_list(self) -> List[Package]:
        """All pinned packages and options in insertion order."""
        return list(self._entries.values())
