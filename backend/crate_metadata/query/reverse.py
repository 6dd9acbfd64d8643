"""Reverse dependency resolution.

For a candidate package, find out whether its latest version declares a
dependency on a target package and which version range it requires. The
candidate's own metadata and the range lookups fail independently: a failing
range lookup is reported on ``ReverseDependency.requirements`` while the
package, license and version are still returned.

Across a list of candidates every candidate gets its own ``Outcome``, so one
failing lookup never hides the others.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from crate_metadata.core.logging import get_logger
from crate_metadata.models.entities import PackageRef, Requirement, ReverseDependency, VersionRow
from crate_metadata.query.lookup import CrateLookup
from crate_metadata.query.outcome import Outcome, capture, collect_present
from crate_metadata.query.versions import VersionKey, lexicographic, order_descending

logger = get_logger(__name__)


def find_package(lookup: CrateLookup, name: str) -> list[PackageRef]:
    """Resolve an exact package name to its ``(id, name)`` rows."""
    return lookup.packages_by_name(name)


def packages_by_homepage(lookup: CrateLookup, homepage: str, repository: str) -> list[PackageRef]:
    """Packages published from the given homepage and repository."""
    return lookup.packages_by_homepage(homepage, repository)


def requirements_for(
    lookup: CrateLookup,
    crate_id: str,
    version_id: str,
    targets: Iterable[PackageRef],
) -> Outcome[list[Requirement]]:
    """Ranges that version ``version_id`` of ``crate_id`` requires on each target.

    Targets without a matching dependency edge are left out.
    """
    per_target = [_requirement_on(lookup, crate_id, version_id, target) for target in targets]
    return collect_present(per_target)


def _requirement_on(
    lookup: CrateLookup,
    crate_id: str,
    version_id: str,
    target: PackageRef,
) -> Outcome[Requirement | None]:
    found = capture(lookup.requirement, crate_id, version_id, target.id)
    if not found.ok or found.value is None:
        return found  # type: ignore[return-value]
    return Outcome.success(Requirement(req=found.value, name=target.name))


def _latest_row(rows: Sequence[VersionRow], version_key: VersionKey) -> VersionRow | None:
    ordered = order_descending(rows, lambda row: row.num, version_key)
    return ordered[0] if ordered else None


def _resolve(
    lookup: CrateLookup,
    candidate_name: str,
    target_name: str,
    version_key: VersionKey,
) -> ReverseDependency | None:
    targets = find_package(lookup, target_name)
    latest = _latest_row(lookup.version_metadata(candidate_name), version_key)
    if latest is None:
        logger.debug("Candidate has no versions", extra={"ctx_crate": candidate_name})
        return None
    requirements = requirements_for(lookup, latest.crate_id, latest.version_id, targets)
    return ReverseDependency(
        package_id=latest.crate_id,
        package_name=latest.crate_name,
        license=latest.license,
        latest_version=latest.num,
        requirements=requirements,
    )


def reverse_dependency(
    lookup: CrateLookup,
    candidate_name: str,
    target_name: str,
    version_key: VersionKey = lexicographic,
) -> Outcome[ReverseDependency | None]:
    """Describe how ``candidate_name`` depends on ``target_name``.

    The value is None when the candidate has no versions. Failures resolving
    the target or the candidate fail the returned outcome; failures looking up
    ranges fail only ``requirements``.
    """
    outcome = capture(_resolve, lookup, candidate_name, target_name, version_key)
    if not outcome.ok:
        logger.warning(
            "Reverse dependency lookup failed",
            extra={"ctx_crate": candidate_name, "ctx_target": target_name, "ctx_error": str(outcome.error)},
        )
    return outcome


def reverse_dependency_for_list(
    lookup: CrateLookup,
    candidate_names: Iterable[str],
    target_name: str,
    version_key: VersionKey = lexicographic,
) -> list[Outcome[ReverseDependency | None]]:
    """One outcome per candidate, in input order.

    The target is resolved again for every candidate.
    """
    results = [
        reverse_dependency(lookup, candidate_name, target_name, version_key=version_key)
        for candidate_name in candidate_names
    ]
    logger.debug(
        "Resolved reverse dependencies",
        extra={
            "ctx_target": target_name,
            "ctx_count": len(results),
            "ctx_failed": sum(1 for result in results if not result.ok),
        },
    )
    return results


__all__ = [
    "find_package",
    "packages_by_homepage",
    "requirements_for",
    "reverse_dependency",
    "reverse_dependency_for_list",
]
