"""Dependency lookups for a version or a package's latest version."""

from __future__ import annotations

from crate_metadata.core.logging import get_logger
from crate_metadata.models.entities import DependencyRef, KindFilter
from crate_metadata.query.errors import UnknownPackage
from crate_metadata.query.lookup import CrateLookup
from crate_metadata.query.versions import VersionKey, latest_version, lexicographic

logger = get_logger(__name__)


def dependencies_for(
    lookup: CrateLookup,
    version_id: str,
    kind: KindFilter = KindFilter.ALL,
) -> list[DependencyRef]:
    """Return ``(dependency_id, target_name)`` pairs declared by a version.

    Results keep the store's natural order.
    """
    dependencies = lookup.dependencies(version_id, kind.code)
    logger.debug(
        "Resolved dependencies",
        extra={"ctx_version_id": version_id, "ctx_kind": kind.value, "ctx_count": len(dependencies)},
    )
    return dependencies


def latest_dependencies_for(
    lookup: CrateLookup,
    crate_name: str,
    kind: KindFilter = KindFilter.ALL,
    version_key: VersionKey = lexicographic,
) -> list[DependencyRef]:
    """Dependencies of the latest version of ``crate_name``.

    Raises UnknownPackage when the package has no versions to anchor on.
    """
    latest = latest_version(lookup, crate_name, version_key=version_key)
    if latest is None:
        raise UnknownPackage(crate_name)
    return dependencies_for(lookup, latest.id, kind)


def dependency_targets_like(lookup: CrateLookup, fragment: str) -> list[DependencyRef]:
    """Distinct dependency targets whose name contains ``fragment``."""
    return lookup.dependency_targets_like(fragment)


__all__ = ["dependencies_for", "latest_dependencies_for", "dependency_targets_like"]
