"""Tests for reading pool descriptions."""

import json

import pytest

from constants import RepositoryKinds
from overlay.pool import event_from_dict, load_pool_event


def test_event_from_dict_builds_repositories_and_requires():
    event = event_from_dict({
        "requires": {"Vendor/A": "^1.0", "php": None},
        "repositories": [
            {"type": "root", "packages": [{"name": "my/project", "version": "dev-main"}]},
            {"type": "Platform", "packages": [{"name": "php", "version": "8.2.0"}]},
            {"packages": [{"name": "vendor/a", "version": "1.0.0"}]},
        ],
        "packages": [{"name": "vendor/a", "version": "1.0.0", "require": {"vendor/b": "*"}}],
    })

    assert event.requires == {"vendor/a": "^1.0", "php": "*"}
    assert [r.kind for r in event.repositories] == [
        RepositoryKinds.ROOT, RepositoryKinds.PLATFORM, RepositoryKinds.PACKAGE,
    ]
    assert [p.name for p in event.root_packages()] == ["my/project", "php"]
    assert event.packages[0].requires[0].target == "vendor/b"


def test_event_from_dict_rejects_unknown_repository_kind():
    with pytest.raises(ValueError):
        event_from_dict({"repositories": [{"type": "vcs", "packages": []}]})


def test_event_from_dict_rejects_nameless_package():
    with pytest.raises(ValueError):
        event_from_dict({"packages": [{"version": "1.0.0"}]})


@pytest.mark.parametrize("data", [
    {"packages": ["a/b"]},
    {"repositories": [{"type": "root", "packages": [["my/project"]]}]},
])
def test_event_from_dict_rejects_non_object_package_entries(data):
    with pytest.raises(ValueError, match="JSON objects"):
        event_from_dict(data)


def test_load_pool_event_reads_file(tmp_path):
    pool_path = tmp_path / "pool.json"
    pool_path.write_text(json.dumps({"requires": {"vendor/a": "*"}, "packages": []}), encoding="utf-8")

    event = load_pool_event(str(pool_path))

    assert event.requires == {"vendor/a": "*"}
    assert event.repositories == []


def test_load_pool_event_rejects_non_object(tmp_path):
    pool_path = tmp_path / "pool.json"
    pool_path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_pool_event(str(pool_path))
