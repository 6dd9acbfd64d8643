"""Resolve a package name to its published versions."""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from crate_metadata.core.logging import get_logger
from crate_metadata.models.entities import VersionRef
from crate_metadata.query.lookup import CrateLookup

logger = get_logger(__name__)

VersionKey = Callable[[str], Any]
R = TypeVar("R")


def lexicographic(num: str) -> str:
    """Order version numbers as plain strings.

    This is not semver aware: "0.9.0" sorts above "0.10.0". Pass a different
    ``version_key`` to the resolvers to change which version counts as latest.
    """
    return num


def order_descending(items: Sequence[R], num_of: Callable[[R], str], version_key: VersionKey = lexicographic) -> list[R]:
    """Sort ``items`` by version number, highest first; ties keep store order."""
    return sorted(items, key=lambda item: version_key(num_of(item)), reverse=True)


def resolve_versions(
    lookup: CrateLookup,
    crate_name: str,
    latest_only: bool = False,
    version_key: VersionKey = lexicographic,
) -> list[VersionRef]:
    """Return ``(version_id, num)`` pairs for ``crate_name``, highest first.

    An unknown name yields an empty list. LookupFailure propagates.
    """
    versions = order_descending(lookup.versions(crate_name), lambda ref: ref.num, version_key)
    if latest_only:
        versions = versions[:1]
    logger.debug(
        "Resolved versions",
        extra={"ctx_crate": crate_name, "ctx_latest_only": latest_only, "ctx_count": len(versions)},
    )
    return versions


def latest_version(
    lookup: CrateLookup,
    crate_name: str,
    version_key: VersionKey = lexicographic,
) -> VersionRef | None:
    latest = resolve_versions(lookup, crate_name, latest_only=True, version_key=version_key)
    return latest[0] if latest else None


__all__ = ["VersionKey", "lexicographic", "order_descending", "resolve_versions", "latest_version"]
