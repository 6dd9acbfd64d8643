"""Tests for reverse dependency resolution."""

from __future__ import annotations

from crate_metadata.db.lookup import SQLiteCrateLookup
from crate_metadata.query import (
    LookupFailure,
    Outcome,
    collect_present,
    find_package,
    packages_by_homepage,
    reverse_dependency,
    reverse_dependency_for_list,
)


def test_candidate_depending_on_target(lookup: SQLiteCrateLookup) -> None:
    outcome = reverse_dependency(lookup, "bevy_egui", "bevy")
    assert outcome.ok
    found = outcome.unwrap()
    assert (found.package_id, found.package_name, found.license, found.latest_version) == (
        "2",
        "bevy_egui",
        "MIT",
        "0.17.1",
    )
    assert found.requirements.unwrap() == [("^0.9", "bevy")]


def test_candidate_without_edge_has_empty_requirements(lookup: SQLiteCrateLookup) -> None:
    found = reverse_dependency(lookup, "serde", "bevy").unwrap()
    assert found.latest_version == "1.0.150"
    assert found.requirements.unwrap() == []


def test_unknown_target_has_empty_requirements(lookup: SQLiteCrateLookup) -> None:
    found = reverse_dependency(lookup, "bevy_egui", "no-such-target").unwrap()
    assert found.requirements.unwrap() == []


def test_only_latest_version_counts(lookup: SQLiteCrateLookup) -> None:
    # bevy 0.9.0 sorts above 0.10.0 as a string, so its edge onto bevy_render is used
    found = reverse_dependency(lookup, "bevy", "bevy_render").unwrap()
    assert found.latest_version == "0.9.0"
    assert found.requirements.unwrap() == [("^0.9.0", "bevy_render")]


def test_version_key_changes_latest(lookup: SQLiteCrateLookup) -> None:
    def numeric(num: str) -> tuple[int, ...]:
        return tuple(int(part) for part in num.split("."))

    found = reverse_dependency(lookup, "bevy", "bevy_render", version_key=numeric).unwrap()
    assert found.latest_version == "0.10.0"
    assert found.requirements.unwrap() == [("^0.10", "bevy_render")]


def test_candidate_without_versions(lookup: SQLiteCrateLookup) -> None:
    outcome = reverse_dependency(lookup, "lonely", "bevy")
    assert outcome.ok
    assert outcome.value is None


def test_requirement_failure_keeps_outer_metadata(make_faulty) -> None:
    faulty = make_faulty(requirement={"2"})
    outcome = reverse_dependency(faulty, "bevy_egui", "bevy")
    assert outcome.ok
    found = outcome.value
    assert found.package_name == "bevy_egui"
    assert not found.requirements.ok
    assert isinstance(found.requirements.error, LookupFailure)


def test_target_resolution_failure_fails_outer(make_faulty) -> None:
    outcome = reverse_dependency(make_faulty(packages_by_name=None), "bevy_egui", "bevy")
    assert not outcome.ok
    assert isinstance(outcome.error, LookupFailure)


def test_list_isolates_failures_and_keeps_order(make_faulty) -> None:
    faulty = make_faulty(version_metadata={"a"})
    results = reverse_dependency_for_list(faulty, ["a", "bevy_egui"], "bevy")
    assert len(results) == 2
    assert not results[0].ok
    assert results[1].ok
    assert results[1].value.requirements.unwrap() == [("^0.9", "bevy")]


def test_list_length_matches_input(lookup: SQLiteCrateLookup) -> None:
    names = ["serde", "lonely", "bevy_egui", "ghost", "bevy_egui"]
    results = reverse_dependency_for_list(lookup, names, "bevy")
    assert len(results) == len(names)
    assert [result.value.package_name if result.value else None for result in results] == [
        "serde",
        None,
        "bevy_egui",
        None,
        "bevy_egui",
    ]


def test_list_resolves_target_per_candidate(lookup: SQLiteCrateLookup) -> None:
    calls: list[str] = []

    class CountingLookup:
        def __getattr__(self, name: str):
            return getattr(lookup, name)

        def packages_by_name(self, name: str):
            calls.append(name)
            return lookup.packages_by_name(name)

    reverse_dependency_for_list(CountingLookup(), ["serde", "bevy_egui", "bevy"], "bevy")
    assert calls == ["bevy", "bevy", "bevy"]


def test_repeated_calls_are_identical(lookup: SQLiteCrateLookup) -> None:
    first = reverse_dependency_for_list(lookup, ["bevy_egui", "serde"], "bevy")
    second = reverse_dependency_for_list(lookup, ["bevy_egui", "serde"], "bevy")
    assert first == second


def test_target_discovery(lookup: SQLiteCrateLookup) -> None:
    assert find_package(lookup, "bevy") == [("1", "bevy")]
    engine = packages_by_homepage(lookup, "https://bevyengine.org", "https://github.com/bevyengine/bevy")
    assert {ref.name for ref in engine} == {"bevy", "bevy_render"}


def test_collect_present_drops_missing_and_fails_on_error() -> None:
    assert collect_present([Outcome.success(1), Outcome.success(None), Outcome.success(3)]).unwrap() == [1, 3]
    failure = LookupFailure("boom")
    collected = collect_present([Outcome.success(1), Outcome.failure(failure)])
    assert collected.error is failure
