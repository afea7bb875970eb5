"""Pinning of the transitive dependency closure of a locked package."""

from __future__ import annotations

import logging
from typing import Iterator, List

from constants import Constants
from errors import InternalConsistencyError, LockInconsistencyError
from lockfile.authority import LockAuthority
from lockfile.models import Package, RequirementLink
from .infrastructure import is_infrastructure_package
from .package_set import PinnedPackageSet

logger = logging.getLogger(__name__)


def resolve_requirement(authority: LockAuthority, link: RequirementLink) -> List[Package]:
    """Resolve a requirement link to the locked package(s) that satisfy it.

    A concrete match wins. Otherwise the target is treated as a virtual
    package and every locked provider of it is returned.

    Raises:
        LockInconsistencyError: nothing in the lock satisfies the link.
        InternalConsistencyError: a listed provider is missing from the lock.
    """
    found = authority.find_package(link.target, link.constraint)
    if found is not None:
        return [found]

    provider_names = authority.get_providers(link.target)
    if not provider_names:
        raise LockInconsistencyError(link.source, link.target)

    providers = []
    for provider_name in provider_names:
        provider = authority.find_package(provider_name, Constants.ANY_CONSTRAINT)
        if provider is None:
            raise InternalConsistencyError(provider_name, link.target)
        providers.append(provider)
    return providers


def _pin_requirements(
    authority: LockAuthority, package: Package, acc: PinnedPackageSet
) -> Iterator[Package]:
    """Pin the direct requirements of ``package``, yielding each newly pinned package.

    The caller descends into a yielded package before resuming, so pins are
    recorded in depth-first order.
    """
    for link in package.requires:
        if is_infrastructure_package(link.target):
            continue
        # Already decided names have had their own tree pinned.
        if link.target in acc:
            continue

        for found in resolve_requirement(authority, link):
            logger.info(
                "Locking package %s to %s (dependency of %s based on upstream lock file).",
                found.name,
                found.version,
                package.name,
            )
            acc.set(found.name, found)
            yield found


def pin_dependency_closure(
    authority: LockAuthority, package: Package, acc: PinnedPackageSet
) -> None:
    """Pin every non-infrastructure package reachable from ``package`` into ``acc``.

    Each name is pinned once; the membership check on ``acc`` is what makes
    the walk terminate on cyclic requirement graphs. The walk keeps an
    explicit stack of generators instead of recursing, so deep graphs cannot
    exhaust the interpreter stack.
    """
    stack = [_pin_requirements(authority, package, acc)]
    while stack:
        pinned = next(stack[-1], None)
        if pinned is None:
            stack.pop()
            continue
        stack.append(_pin_requirements(authority, pinned, acc))
