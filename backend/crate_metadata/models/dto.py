"""Pydantic DTOs exposed via API and CLI."""

from __future__ import annotations

from pydantic import BaseModel, Field

from crate_metadata.models.entities import (
    Crate,
    DependencyKind,
    DependencyRef,
    ReverseDependency,
    VersionRef,
)
from crate_metadata.query.outcome import Outcome


class VersionResponse(BaseModel):
    id: str
    num: str


class DependencyRefResponse(BaseModel):
    id: str
    name: str | None


class CrateDependencyResponse(BaseModel):
    crate_id: str
    name: str | None
    req: str
    kind: DependencyKind


class CrateResponse(BaseModel):
    id: str
    name: str
    description: str
    downloads: int
    homepage_url: str | None
    repo_url: str | None
    last_update: str
    tags: list[str]
    versions: list[str]
    dependencies: list[CrateDependencyResponse]


class KeywordsResponse(BaseModel):
    name: str
    keywords: list[str]


class RequirementResponse(BaseModel):
    req: str
    name: str


class ReverseDependencyRequest(BaseModel):
    target: str | None = Field(default=None, description="Target package; defaults to the configured target")
    candidates: list[str] = Field(default_factory=list, description="Candidate package names")


class ReverseDependencyResult(BaseModel):
    candidate: str
    ok: bool
    error: str | None = None
    found: bool = False
    package_id: str | None = None
    package_name: str | None = None
    license: str | None = None
    latest_version: str | None = None
    requirements: list[RequirementResponse] | None = None
    requirements_error: str | None = None


class ReverseDependencyResponse(BaseModel):
    target: str
    results: list[ReverseDependencyResult]


def version_response(ref: VersionRef) -> VersionResponse:
    return VersionResponse(id=ref.id, num=ref.num)


def dependency_ref_response(ref: DependencyRef) -> DependencyRefResponse:
    return DependencyRefResponse(id=ref.id, name=ref.name)


def crate_response(crate: Crate) -> CrateResponse:
    return CrateResponse(
        id=crate.id,
        name=crate.name,
        description=crate.description,
        downloads=crate.downloads,
        homepage_url=crate.homepage_url,
        repo_url=crate.repo_url,
        last_update=crate.last_update,
        tags=sorted(crate.tags),
        versions=list(crate.versions),
        dependencies=[
            CrateDependencyResponse(crate_id=dep.crate_id, name=dep.name, req=dep.req, kind=dep.kind)
            for dep in crate.dependencies
        ],
    )


def reverse_dependency_result(candidate: str, outcome: Outcome[ReverseDependency | None]) -> ReverseDependencyResult:
    if not outcome.ok:
        return ReverseDependencyResult(candidate=candidate, ok=False, error=str(outcome.error))
    found = outcome.value
    if found is None:
        return ReverseDependencyResult(candidate=candidate, ok=True)
    result = ReverseDependencyResult(
        candidate=candidate,
        ok=True,
        found=True,
        package_id=found.package_id,
        package_name=found.package_name,
        license=found.license,
        latest_version=found.latest_version,
    )
    if found.requirements.ok:
        result.requirements = [
            RequirementResponse(req=item.req, name=item.name) for item in found.requirements.value or []
        ]
    else:
        result.requirements_error = str(found.requirements.error)
    return result


__all__ = [
    "VersionResponse",
    "DependencyRefResponse",
    "CrateDependencyResponse",
    "CrateResponse",
    "KeywordsResponse",
    "RequirementResponse",
    "ReverseDependencyRequest",
    "ReverseDependencyResult",
    "ReverseDependencyResponse",
    "version_response",
    "dependency_ref_response",
    "crate_response",
    "reverse_dependency_result",
]
