"""Error taxonomy for crate metadata lookups."""

from __future__ import annotations


class CrateQueryError(Exception):
    """Base class for every error raised by the query layer."""


class LookupFailure(CrateQueryError):
    """The backing store could not execute a query."""


class UnknownPackage(CrateQueryError):
    """A named package has no resolvable versions."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown package: {name!r}")
        self.name = name


class SnapshotError(CrateQueryError):
    """The snapshot database cannot be opened."""


__all__ = ["CrateQueryError", "LookupFailure", "UnknownPackage", "SnapshotError"]
