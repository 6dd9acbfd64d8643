"""Lookup capability the query operations are written against."""

from __future__ import annotations

from typing import Protocol

from crate_metadata.models.entities import (
    DependencyRef,
    DependencyRow,
    PackageRef,
    PackageRow,
    VersionRef,
    VersionRow,
)


class CrateLookup(Protocol):
    """Fixed set of read-only lookups over a registry snapshot.

    Every method raises LookupFailure when the store cannot run the query.
    Missing rows are reported as an empty list or None, never as an error.
    """

    def versions(self, crate_name: str) -> list[VersionRef]:
        ...

    def version_metadata(self, crate_name: str) -> list[VersionRow]:
        ...

    def dependencies(self, version_id: str, kind_code: int | None) -> list[DependencyRef]:
        ...

    def dependency_rows(self, version_id: str) -> list[DependencyRow]:
        ...

    def keywords(self, crate_id: str) -> list[str]:
        ...

    def packages_by_name(self, name: str) -> list[PackageRef]:
        ...

    def packages_by_homepage(self, homepage: str, repository: str) -> list[PackageRef]:
        ...

    def dependency_targets_like(self, fragment: str) -> list[DependencyRef]:
        ...

    def requirement(self, crate_id: str, version_id: str, target_id: str) -> str | None:
        ...

    def package(self, crate_name: str) -> PackageRow | None:
        ...


__all__ = ["CrateLookup"]
