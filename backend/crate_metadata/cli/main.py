"""CLI entrypoint for crate metadata queries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, List, Optional

import typer

from crate_metadata.core.config import Settings
from crate_metadata.core.logging import configure_logging
from crate_metadata.db.lookup import SQLiteCrateLookup
from crate_metadata.db.snapshot import open_snapshot, verify_snapshot
from crate_metadata.models.dto import (
    crate_response,
    dependency_ref_response,
    reverse_dependency_result,
    version_response,
)
from crate_metadata.models.entities import KindFilter
from crate_metadata.query import (
    CrateQueryError,
    assemble_crate,
    dependency_targets_like,
    find_package,
    keywords_for,
    latest_dependencies_for,
    resolve_versions,
    reverse_dependency_for_list,
)

app = typer.Typer(name="crateq", help="Query a crates.io database dump snapshot")

DB_OPTION = typer.Option(None, "--db", help="Snapshot database path (overrides config)")


def _run(db_path: Optional[Path], query: Callable[[SQLiteCrateLookup, Settings], Any]) -> None:
    settings = Settings.from_yaml()
    configure_logging(settings.log_level, use_json=settings.log_json)
    path = db_path or settings.db_path
    try:
        db = open_snapshot(path, read_only=settings.read_only)
    except CrateQueryError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    try:
        verify_snapshot(db)
        payload = query(SQLiteCrateLookup(db), settings)
    except CrateQueryError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    finally:
        db.close()
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def versions(
    name: str = typer.Argument(..., help="Crate name"),
    latest: bool = typer.Option(False, "--latest", help="Only print the latest version"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """List a crate's versions, highest first."""
    _run(
        db,
        lambda lookup, _: [
            version_response(ref).model_dump() for ref in resolve_versions(lookup, name, latest_only=latest)
        ],
    )


@app.command()
def deps(
    name: str = typer.Argument(..., help="Crate name"),
    kind: KindFilter = typer.Option(KindFilter.ALL, "--kind", help="Dependency kind filter"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """List the dependencies of a crate's latest version."""
    _run(
        db,
        lambda lookup, _: [
            dependency_ref_response(ref).model_dump() for ref in latest_dependencies_for(lookup, name, kind)
        ],
    )


@app.command()
def keywords(
    name: str = typer.Argument(..., help="Crate name"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """List the keywords tagged on a crate."""

    def query(lookup: SQLiteCrateLookup, _: Settings) -> list[str]:
        found: set[str] = set()
        for package in find_package(lookup, name):
            found |= keywords_for(lookup, package.id)
        return sorted(found)

    _run(db, query)


@app.command()
def crate(
    name: str = typer.Argument(..., help="Crate name"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Print the assembled crate record."""

    def query(lookup: SQLiteCrateLookup, _: Settings) -> dict[str, Any] | None:
        record = assemble_crate(lookup, name)
        return None if record is None else crate_response(record).model_dump(mode="json")

    _run(db, query)


@app.command("rev-deps")
def rev_deps(
    candidates: List[str] = typer.Argument(..., help="Candidate crate names"),
    target: Optional[str] = typer.Option(None, "--target", help="Target crate (defaults to config)"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Show which candidates depend on the target crate, and with which range."""

    def query(lookup: SQLiteCrateLookup, settings: Settings) -> list[dict[str, Any]]:
        target_name = target or settings.default_target
        outcomes = reverse_dependency_for_list(lookup, candidates, target_name)
        return [
            reverse_dependency_result(candidate, outcome).model_dump()
            for candidate, outcome in zip(candidates, outcomes)
        ]

    _run(db, query)


@app.command()
def plugins(
    fragment: str = typer.Argument(..., help="Substring of the dependency target name"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """List dependency targets whose name contains FRAGMENT."""
    _run(
        db,
        lambda lookup, _: [dependency_ref_response(ref).model_dump() for ref in dependency_targets_like(lookup, fragment)],
    )


if __name__ == "__main__":
    app()
