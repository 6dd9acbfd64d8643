"""Tests for crate record assembly."""

from __future__ import annotations

import pytest

from crate_metadata.db.lookup import SQLiteCrateLookup
from crate_metadata.models.entities import DependencyKind
from crate_metadata.query import LookupFailure, UnknownPackage, assemble_crate, parse_downloads


def test_assemble_full_record(lookup: SQLiteCrateLookup) -> None:
    crate = assemble_crate(lookup, "bevy")
    assert crate is not None
    assert crate.id == "1"
    assert crate.name == "bevy"
    assert crate.description == "A data-driven game engine"
    assert crate.downloads == 1000
    assert crate.homepage_url == "https://bevyengine.org"
    assert crate.repo_url == "https://github.com/bevyengine/bevy"
    assert crate.last_update == "2023-01-10"
    assert crate.tags == {"game", "engine"}
    assert crate.versions == ["0.9.0", "0.8.1", "0.10.0"]
    kinds = {(dep.name, dep.req): dep.kind for dep in crate.dependencies}
    assert kinds == {
        ("bevy_render", "^0.9.0"): DependencyKind.NORMAL,
        ("serde", "^1"): DependencyKind.DEV,
        ("serde", "^1.0.100"): DependencyKind.UNKNOWN,
    }
    assert {dep.crate_id for dep in crate.dependencies} == {"4", "3"}


def test_empty_urls_become_none(lookup: SQLiteCrateLookup) -> None:
    crate = assemble_crate(lookup, "bevy_egui")
    assert crate.homepage_url is None
    assert crate.repo_url == "https://github.com/mvlabat/bevy_egui"


def test_unparseable_downloads_are_zero(lookup: SQLiteCrateLookup) -> None:
    assert assemble_crate(lookup, "serde").downloads == 0
    assert assemble_crate(lookup, "bevy_render").downloads == 0


def test_crate_without_keywords_has_empty_tags(lookup: SQLiteCrateLookup) -> None:
    assert assemble_crate(lookup, "serde").tags == frozenset()


@pytest.mark.parametrize("name", ["lonely", "ghost"])
def test_no_versions_is_unknown_package(lookup: SQLiteCrateLookup, name: str) -> None:
    with pytest.raises(UnknownPackage):
        assemble_crate(lookup, name)


def test_keyword_failure_is_downgraded(make_faulty) -> None:
    crate = assemble_crate(make_faulty(keywords=None), "bevy")
    assert crate is not None
    assert crate.tags == frozenset()
    assert crate.versions


def test_other_failures_propagate(make_faulty) -> None:
    with pytest.raises(LookupFailure):
        assemble_crate(make_faulty(dependency_rows=None), "bevy")
    with pytest.raises(LookupFailure):
        assemble_crate(make_faulty(package=None), "bevy")


def test_missing_package_row_returns_none(lookup: SQLiteCrateLookup) -> None:
    class OrphanVersions:
        def __getattr__(self, name: str):
            return getattr(lookup, name)

        def package(self, crate_name: str):
            return None

    assert assemble_crate(OrphanVersions(), "bevy") is None


def test_version_key_selects_dependencies(lookup: SQLiteCrateLookup) -> None:
    crate = assemble_crate(lookup, "bevy", version_key=lambda num: tuple(int(p) for p in num.split(".")))
    assert crate.versions == ["0.10.0", "0.9.0", "0.8.1"]
    assert [(dep.name, dep.req) for dep in crate.dependencies] == [("bevy_render", "^0.10")]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("42", 42), ("0", 0), ("", 0), ("n/a", 0), ("-3", 0), (None, 0), (7, 7)],
)
def test_parse_downloads(raw, expected: int) -> None:
    assert parse_downloads(raw) == expected


def test_repeated_assembly_is_identical(lookup: SQLiteCrateLookup) -> None:
    assert assemble_crate(lookup, "bevy_egui") == assemble_crate(lookup, "bevy_egui")
