"""Read-only queries over a registry dump snapshot."""

from .errors import CrateQueryError, LookupFailure, SnapshotError, UnknownPackage
from .outcome import Outcome, capture, collect_present
from .lookup import CrateLookup
from .versions import VersionKey, latest_version, lexicographic, resolve_versions
from .dependencies import dependencies_for, dependency_targets_like, latest_dependencies_for
from .keywords import keywords_for
from .reverse import (
    find_package,
    packages_by_homepage,
    requirements_for,
    reverse_dependency,
    reverse_dependency_for_list,
)
from .assembler import assemble_crate, parse_downloads

__all__ = [
    "CrateQueryError",
    "LookupFailure",
    "SnapshotError",
    "UnknownPackage",
    "Outcome",
    "capture",
    "collect_present",
    "CrateLookup",
    "VersionKey",
    "latest_version",
    "lexicographic",
    "resolve_versions",
    "dependencies_for",
    "dependency_targets_like",
    "latest_dependencies_for",
    "keywords_for",
    "find_package",
    "packages_by_homepage",
    "requirements_for",
    "reverse_dependency",
    "reverse_dependency_for_list",
    "assemble_crate",
    "parse_downloads",
]
