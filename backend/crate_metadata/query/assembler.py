"""Assemble a complete crate record from the individual lookups."""

from __future__ import annotations

from crate_metadata.core.logging import get_logger
from crate_metadata.models.entities import Crate, CrateDependency, DependencyKind
from crate_metadata.query.errors import LookupFailure, UnknownPackage
from crate_metadata.query.keywords import keywords_for
from crate_metadata.query.lookup import CrateLookup
from crate_metadata.query.versions import VersionKey, lexicographic, resolve_versions

logger = get_logger(__name__)


def parse_downloads(raw: object) -> int:
    """Download counts are stored as text; anything but a non-negative int is 0."""
    try:
        value = int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return 0
    return value if value >= 0 else 0


def _safe_keywords(lookup: CrateLookup, crate_id: str) -> frozenset[str]:
    try:
        return frozenset(keywords_for(lookup, crate_id))
    except LookupFailure as exc:
        logger.warning("Keyword lookup failed, continuing without keywords", extra={"ctx_crate_id": crate_id, "ctx_error": str(exc)})
        return frozenset()


def assemble_crate(
    lookup: CrateLookup,
    crate_name: str,
    version_key: VersionKey = lexicographic,
) -> Crate | None:
    """Build the full record for ``crate_name``.

    Raises UnknownPackage when the package has no versions. Returns None when
    versions exist but the package row itself is missing.
    """
    versions = resolve_versions(lookup, crate_name, version_key=version_key)
    if not versions:
        raise UnknownPackage(crate_name)
    latest = versions[0]

    dependencies = [
        CrateDependency(
            crate_id=row.crate_id,
            name=row.name,
            req=row.req,
            kind=DependencyKind.from_code(row.kind),
        )
        for row in lookup.dependency_rows(latest.id)
    ]

    package = lookup.package(crate_name)
    if package is None:
        logger.debug("Package row missing for versioned crate", extra={"ctx_crate": crate_name})
        return None

    return Crate(
        id=package.id,
        name=package.name,
        description=package.description,
        downloads=parse_downloads(package.downloads),
        homepage_url=package.homepage or None,
        repo_url=package.repository or None,
        last_update=package.updated_at,
        tags=_safe_keywords(lookup, package.id),
        versions=[version.num for version in versions],
        dependencies=dependencies,
    )


__all__ = ["assemble_crate", "parse_downloads"]
