"""Internal records read from a registry dump snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from crate_metadata.query.outcome import Outcome


class VersionRef(NamedTuple):
    id: str
    num: str


class DependencyRef(NamedTuple):
    id: str
    name: str | None


class PackageRef(NamedTuple):
    id: str
    name: str


class Requirement(NamedTuple):
    req: str
    name: str


class DependencyKind(str, Enum):
    NORMAL = "normal"
    DEV = "dev"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: object) -> "DependencyKind":
        """Map a stored kind code; anything unrecognised is UNKNOWN."""
        if isinstance(code, int) and not isinstance(code, bool):
            code = str(code)
        return _KIND_BY_CODE.get(code, cls.UNKNOWN)  # type: ignore[arg-type]


# exact stored text, the same values the kind filter compares against
_KIND_BY_CODE = {"0": DependencyKind.NORMAL, "2": DependencyKind.DEV}


class KindFilter(str, Enum):
    NORMAL = "normal"
    DEV = "dev"
    ALL = "all"

    @property
    def code(self) -> int | None:
        """Stored kind code to filter on; None means no filter."""
        if self is KindFilter.NORMAL:
            return 0
        if self is KindFilter.DEV:
            return 2
        return None


@dataclass(slots=True)
class VersionRow:
    crate_id: str
    crate_name: str
    license: str
    num: str
    version_id: str


@dataclass(slots=True)
class DependencyRow:
    crate_id: str
    name: str | None
    req: str
    kind: str | None


@dataclass(slots=True)
class PackageRow:
    id: str
    name: str
    description: str
    downloads: str
    homepage: str | None
    repository: str | None
    updated_at: str


@dataclass(slots=True)
class CrateDependency:
    crate_id: str
    name: str | None
    req: str
    kind: DependencyKind


@dataclass(slots=True)
class Crate:
    id: str
    name: str
    description: str
    downloads: int
    homepage_url: str | None
    repo_url: str | None
    last_update: str
    tags: frozenset[str] = frozenset()
    versions: list[str] = field(default_factory=list)
    dependencies: list[CrateDependency] = field(default_factory=list)


@dataclass(slots=True)
class ReverseDependency:
    package_id: str
    package_name: str
    license: str
    latest_version: str
    requirements: "Outcome[list[Requirement]]"


__all__ = [
    "VersionRef",
    "DependencyRef",
    "PackageRef",
    "Requirement",
    "DependencyKind",
    "KindFilter",
    "VersionRow",
    "DependencyRow",
    "PackageRow",
    "CrateDependency",
    "Crate",
    "ReverseDependency",
]
