"""Tests for dependency closure pinning."""

import logging

import pytest

from errors import InternalConsistencyError, LockInconsistencyError
from lockfile.authority import LockAuthority
from lockfile.models import Package, RequirementLink
from overlay.package_set import PinnedPackageSet
from overlay.pinner import pin_dependency_closure, resolve_requirement


def pkg(name, version="1.0.0", require=None, provide=None):
    return Package.from_dict({
        "name": name,
        "version": version,
        "require": require or {},
        "provide": provide or {},
    })


def pinned(acc):
    return [(p.name, p.version) for p in acc.to_list()]


def test_pins_transitive_closure_depth_first():
    authority = LockAuthority([
        pkg("app/a", require={"lib/b": "^1.0", "lib/d": "*"}),
        pkg("lib/b", "1.2.0", require={"lib/c": "^2.0"}),
        pkg("lib/c", "2.1.0"),
        pkg("lib/d", "3.0.0"),
    ])
    acc = PinnedPackageSet()

    pin_dependency_closure(authority, authority.find_package("app/a"), acc)

    assert pinned(acc) == [("lib/b", "1.2.0"), ("lib/c", "2.1.0"), ("lib/d", "3.0.0")]


def test_terminates_on_cycles():
    authority = LockAuthority([
        pkg("cycle/a", require={"cycle/b": "*"}),
        pkg("cycle/b", require={"cycle/a": "*"}),
    ])
    a = authority.find_package("cycle/a")
    acc = PinnedPackageSet()
    acc.set(a.name, a)

    pin_dependency_closure(authority, a, acc)

    assert pinned(acc) == [("cycle/a", "1.0.0"), ("cycle/b", "1.0.0")]


def test_diamond_pins_shared_dependency_once():
    authority = LockAuthority([
        pkg("top/a", require={"mid/b": "*", "mid/c": "*"}),
        pkg("mid/b", require={"base/d": "*"}),
        pkg("mid/c", require={"base/d": "*"}),
        pkg("base/d"),
    ])
    acc = PinnedPackageSet()

    pin_dependency_closure(authority, authority.find_package("top/a"), acc)

    assert [name for name, _ in pinned(acc)] == ["mid/b", "base/d", "mid/c"]


def test_second_call_is_idempotent():
    authority = LockAuthority([
        pkg("app/a", require={"lib/b": "*"}),
        pkg("lib/b", require={"lib/c": "*"}),
        pkg("lib/c"),
    ])
    a = authority.find_package("app/a")
    acc = PinnedPackageSet()
    pin_dependency_closure(authority, a, acc)
    before = acc.to_list()

    pin_dependency_closure(authority, a, acc)

    assert acc.to_list() == before
    assert all(x is y for x, y in zip(acc.to_list(), before))


def test_infrastructure_requirements_are_never_pinned():
    authority = LockAuthority([
        pkg("app/a", require={"php": ">=8.1", "ext-json": "*", "lib-curl": "*",
                              "composer-plugin-api": "^2.0", "lib/b": "*"}),
        pkg("lib/b", require={"ext-mbstring": "*"}),
    ])
    acc = PinnedPackageSet()

    pin_dependency_closure(authority, authority.find_package("app/a"), acc)

    assert pinned(acc) == [("lib/b", "1.0.0")]


def test_virtual_requirement_pins_all_providers_with_closures():
    authority = LockAuthority([
        pkg("app/x", require={"psr/iface-implementation": "1.0"}),
        pkg("impl/a", provide={"psr/iface-implementation": "1.0"}, require={"dep/a": "*"}),
        pkg("impl/b", provide={"psr/iface-implementation": "1.0"}, require={"dep/b": "*"}),
        pkg("dep/a"),
        pkg("dep/b"),
    ])
    acc = PinnedPackageSet()

    pin_dependency_closure(authority, authority.find_package("app/x"), acc)

    assert [name for name, _ in pinned(acc)] == ["impl/a", "dep/a", "impl/b", "dep/b"]
    assert "psr/iface-implementation" not in acc


def test_missing_requirement_raises_lock_inconsistency():
    authority = LockAuthority([pkg("app/a", require={"lib/missing": "^1.0"})])

    with pytest.raises(LockInconsistencyError) as exc_info:
        pin_dependency_closure(authority, authority.find_package("app/a"), PinnedPackageSet())

    assert exc_info.value.package == "app/a"
    assert exc_info.value.target == "lib/missing"
    assert "app/a" in str(exc_info.value)
    assert "lib/missing" in str(exc_info.value)


def test_unsatisfied_constraint_without_providers_is_inconsistent():
    authority = LockAuthority([
        pkg("app/a", require={"lib/b": "^2.0"}),
        pkg("lib/b", "1.0.0"),
    ])

    with pytest.raises(LockInconsistencyError):
        pin_dependency_closure(authority, authority.find_package("app/a"), PinnedPackageSet())


class _BrokenAuthority(LockAuthority):
    """Provider index that names a package the lock lacks."""

    def get_providers(self, name):
        return ["ghost/provider"]


def test_provider_missing_from_lock_raises_internal_consistency():
    authority = _BrokenAuthority([pkg("app/a", require={"virt/iface": "*"})])

    with pytest.raises(InternalConsistencyError) as exc_info:
        pin_dependency_closure(authority, authority.find_package("app/a"), PinnedPackageSet())

    assert exc_info.value.provider == "ghost/provider"
    assert exc_info.value.target == "virt/iface"
    assert not isinstance(exc_info.value, LockInconsistencyError)


def test_resolve_requirement_prefers_concrete_package():
    authority = LockAuthority([
        pkg("virt/iface", "1.0.0"),
        pkg("impl/a", provide={"virt/iface": "1.0"}),
    ])
    link = RequirementLink(source="app/a", target="virt/iface", constraint="*")

    assert [p.name for p in resolve_requirement(authority, link)] == ["virt/iface"]


def test_already_pinned_names_are_not_revisited():
    authority = LockAuthority([
        pkg("app/a", require={"lib/b": "*"}),
        pkg("lib/b", "2.0.0", require={"lib/c": "*"}),
        pkg("lib/c"),
    ])
    acc = PinnedPackageSet()
    acc.set("lib/b", pkg("lib/b", "1.0.0"))

    pin_dependency_closure(authority, authority.find_package("app/a"), acc)

    assert pinned(acc) == [("lib/b", "1.0.0")]


def test_deep_chain_does_not_hit_recursion_limit():
    depth = 3000
    packages = [
        pkg(f"chain/p{i}", require={f"chain/p{i + 1}": "*"}) for i in range(depth)
    ]
    packages.append(pkg(f"chain/p{depth}"))
    authority = LockAuthority(packages)
    acc = PinnedPackageSet()

    pin_dependency_closure(authority, authority.find_package("chain/p0"), acc)

    assert len(acc) == depth


def test_pins_are_logged(caplog):
    authority = LockAuthority([pkg("app/a", require={"lib/b": "*"}), pkg("lib/b", "1.4.0")])

    with caplog.at_level(logging.INFO, logger="overlay.pinner"):
        pin_dependency_closure(authority, authority.find_package("app/a"), PinnedPackageSet())

    assert "Locking package lib/b to 1.4.0 (dependency of app/a" in caplog.text


def test_self_version_requirement_pins_sibling_release():
    authority = LockAuthority([
        pkg("mono/core", "3.1.0", require={"mono/util": "self.version"}),
        pkg("mono/util", "3.1.0"),
        pkg("mono/util-legacy", "2.0.0"),
    ])
    core = authority.find_package("mono/core")
    acc = PinnedPackageSet()

    pin_dependency_closure(authority, core, acc)

    assert core.requires[0].constraint == "3.1.0"
    assert pinned(acc) == [("mono/util", "3.1.0")]
