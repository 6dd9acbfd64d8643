"""FastAPI application setup for crate metadata queries."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from crate_metadata.api.dependencies import get_app_settings
from crate_metadata.api.routes_crates import router as crates_router
from crate_metadata.core.logging import configure_logging, get_logger
from crate_metadata.core.metrics import LOOKUP_FAILURES, REQUEST_COUNT, metrics_response
from crate_metadata.query.errors import LookupFailure, SnapshotError, UnknownPackage

configure_logging(get_app_settings().log_level, use_json=get_app_settings().log_json)
logger = get_logger(__name__)

app = FastAPI(
    title="Crate Metadata",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(crates_router, prefix="", tags=["crates"])


def _endpoint(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


@app.exception_handler(UnknownPackage)
async def unknown_package_handler(request: Request, exc: UnknownPackage) -> JSONResponse:
    REQUEST_COUNT.labels(endpoint=_endpoint(request), method=request.method, status="404").inc()
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(LookupFailure)
async def lookup_failure_handler(request: Request, exc: LookupFailure) -> JSONResponse:
    endpoint = _endpoint(request)
    logger.error("Lookup failed", extra={"ctx_endpoint": endpoint, "ctx_error": str(exc)})
    LOOKUP_FAILURES.labels(endpoint=endpoint).inc()
    REQUEST_COUNT.labels(endpoint=endpoint, method=request.method, status="503").inc()
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(SnapshotError)
async def snapshot_error_handler(request: Request, exc: SnapshotError) -> JSONResponse:
    logger.error("Snapshot unavailable", extra={"ctx_error": str(exc)})
    REQUEST_COUNT.labels(endpoint=_endpoint(request), method=request.method, status="503").inc()
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}


@app.get("/metrics", tags=["admin"])
def metrics() -> Response:
    return metrics_response()
