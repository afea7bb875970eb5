"""Data models for locked packages and their requirement links."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class RequirementLink:
    """A requirement from one package onto another name with a version constraint."""
    source: str
    target: str
    constraint: str = "*"

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", self.source.lower())
        object.__setattr__(self, "target", self.target.lower())
        object.__setattr__(self, "constraint", (self.constraint or "*").strip() or "*")


@dataclass(frozen=True)
class Package:
    """An immutable package as offered by a pool or recorded in a lock file."""
    name: str
    version: str
    requires: Tuple[RequirementLink, ...] = field(default_factory=tuple)
    provides: Tuple[RequirementLink, ...] = field(default_factory=tuple)
    replaces: Tuple[RequirementLink, ...] = field(default_factory=tuple)
    package_type: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.lower())
        object.__setattr__(self, "requires", tuple(self.requires))
        object.__setattr__(self, "provides", tuple(self.provides))
        object.__setattr__(self, "replaces", tuple(self.replaces))

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Package":
        """Build a package from a composer-style mapping.

        Reads ``name``, ``version``, ``require``, ``provide``, ``replace`` and
        ``type``. ``require-dev`` is ignored; locked packages never contribute
        their development requirements.

        A ``self.version`` constraint is replaced with the package's own version.

        Raises:
            ValueError: if ``name`` is missing or empty.
        """
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("package entry has no name")
        name = name.strip()
        version = str(data.get("version") or "")

        return cls(
            name=name,
            version=version,
            requires=_links(name, data.get("require"), version),
            provides=_links(name, data.get("provide"), version),
            replaces=_links(name, data.get("replace"), version),
            package_type=data.get("type"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the composer-style mapping used for output."""
        out: Dict[str, Any] = {"name": self.name, "version": self.version}
        if self.package_type:
            out["type"] = self.package_type
        if self.requires:
            out["require"] = {link.target: link.constraint for link in self.requires}
        if self.provides:
            out["provide"] = {link.target: link.constraint for link in self.provides}
        if self.replaces:
            out["replace"] = {link.target: link.constraint for link in self.replaces}
        return out


def _links(source: str, mapping: Any, version: str) -> Tuple[RequirementLink, ...]:
    if not isinstance(mapping, dict):
        return ()
    links = []
    for target, constraint in mapping.items():
        constraint = str(constraint)
        # Packages released together refer to each other by "self.version".
        if constraint.strip() == "self.version":
            constraint = version or "*"
        links.append(RequirementLink(source=source, target=str(target), constraint=constraint))
    return tuple(links)
