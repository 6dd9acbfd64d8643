"""Crate query API routes."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException, Query

from crate_metadata.api.dependencies import get_app_settings, get_lookup
from crate_metadata.core.config import Settings
from crate_metadata.core.metrics import REQUEST_COUNT, REQUEST_LATENCY
from crate_metadata.models.dto import (
    CrateResponse,
    DependencyRefResponse,
    KeywordsResponse,
    ReverseDependencyRequest,
    ReverseDependencyResponse,
    VersionResponse,
    crate_response,
    dependency_ref_response,
    reverse_dependency_result,
    version_response,
)
from crate_metadata.models.entities import KindFilter
from crate_metadata.query import (
    CrateLookup,
    assemble_crate,
    dependencies_for,
    find_package,
    keywords_for,
    latest_dependencies_for,
    resolve_versions,
    reverse_dependency_for_list,
)

router = APIRouter()


@contextmanager
def _observe(endpoint: str, method: str = "GET") -> Iterator[None]:
    start_time = time.perf_counter()
    try:
        yield
    except HTTPException as exc:
        REQUEST_COUNT.labels(endpoint=endpoint, method=method, status=str(exc.status_code)).inc()
        raise
    else:
        REQUEST_COUNT.labels(endpoint=endpoint, method=method, status="200").inc()
    finally:
        REQUEST_LATENCY.labels(endpoint=endpoint, method=method).observe(time.perf_counter() - start_time)


@router.get("/crates/{name}", response_model=CrateResponse, summary="Assemble the full crate record")
async def get_crate(name: str, lookup: CrateLookup = Depends(get_lookup)) -> CrateResponse:
    with _observe("crate"):
        crate = assemble_crate(lookup, name)
        if crate is None:
            raise HTTPException(status_code=404, detail=f"Crate row missing for {name!r}")
    return crate_response(crate)


@router.get("/crates/{name}/versions", response_model=list[VersionResponse], summary="List versions, highest first")
async def list_versions(
    name: str,
    latest: bool = Query(default=False, description="Only return the latest version"),
    lookup: CrateLookup = Depends(get_lookup),
) -> list[VersionResponse]:
    with _observe("versions"):
        versions = resolve_versions(lookup, name, latest_only=latest)
    return [version_response(ref) for ref in versions]


@router.get(
    "/crates/{name}/dependencies",
    response_model=list[DependencyRefResponse],
    summary="Dependencies of the latest version",
)
async def list_latest_dependencies(
    name: str,
    kind: KindFilter = Query(default=KindFilter.ALL),
    lookup: CrateLookup = Depends(get_lookup),
) -> list[DependencyRefResponse]:
    with _observe("latest_dependencies"):
        dependencies = latest_dependencies_for(lookup, name, kind)
    return [dependency_ref_response(ref) for ref in dependencies]


@router.get("/crates/{name}/keywords", response_model=KeywordsResponse, summary="Keywords tagged on a crate")
async def list_keywords(name: str, lookup: CrateLookup = Depends(get_lookup)) -> KeywordsResponse:
    with _observe("keywords"):
        packages = find_package(lookup, name)
        if not packages:
            raise HTTPException(status_code=404, detail=f"Unknown package: {name!r}")
        keywords: set[str] = set()
        for package in packages:
            keywords |= keywords_for(lookup, package.id)
    return KeywordsResponse(name=name, keywords=sorted(keywords))


@router.get(
    "/versions/{version_id}/dependencies",
    response_model=list[DependencyRefResponse],
    summary="Dependencies declared by a version",
)
async def list_version_dependencies(
    version_id: str,
    kind: KindFilter = Query(default=KindFilter.ALL),
    lookup: CrateLookup = Depends(get_lookup),
) -> list[DependencyRefResponse]:
    with _observe("version_dependencies"):
        dependencies = dependencies_for(lookup, version_id, kind)
    return [dependency_ref_response(ref) for ref in dependencies]


@router.post(
    "/reverse-dependencies",
    response_model=ReverseDependencyResponse,
    summary="Which candidates depend on a target crate",
)
async def reverse_dependencies(
    request: ReverseDependencyRequest,
    lookup: CrateLookup = Depends(get_lookup),
    settings: Settings = Depends(get_app_settings),
) -> ReverseDependencyResponse:
    target = request.target or settings.default_target
    with _observe("reverse_dependencies", method="POST"):
        outcomes = reverse_dependency_for_list(lookup, request.candidates, target)
    return ReverseDependencyResponse(
        target=target,
        results=[
            reverse_dependency_result(candidate, outcome)
            for candidate, outcome in zip(request.candidates, outcomes)
        ],
    )
