"""Open a previously imported registry dump snapshot."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from crate_metadata.core.config import Settings
from crate_metadata.core.logging import get_logger
from crate_metadata.db.sqlite import SQLiteDatabase
from crate_metadata.query.errors import LookupFailure, SnapshotError

logger = get_logger(__name__)

SNAPSHOT_RELATIONS = ("crates", "versions", "dependencies", "keywords", "crates_keywords")


def open_snapshot(db_path: Path, read_only: bool = True) -> SQLiteDatabase:
    """Return a handle on the snapshot at ``db_path``.

    The file must already exist; producing it from a dump archive is the
    importer's job.
    """
    path = db_path.expanduser()
    if not path.is_file():
        raise SnapshotError(f"Snapshot database not found: {path}")
    db = SQLiteDatabase(path, read_only=read_only)
    logger.debug("Opened snapshot", extra={"ctx_db_path": str(path), "ctx_read_only": read_only})
    return db


def open_configured_snapshot(settings: Settings) -> SQLiteDatabase:
    return open_snapshot(settings.db_path, read_only=settings.read_only)


def verify_snapshot(db: SQLiteDatabase) -> None:
    """Raise LookupFailure when one of the dump relations is missing."""
    try:
        present = db.table_names()
    except sqlite3.Error as exc:
        raise LookupFailure(f"Unable to inspect snapshot schema: {exc}") from exc
    missing = [name for name in SNAPSHOT_RELATIONS if name not in present]
    if missing:
        raise LookupFailure(f"Snapshot is missing relations: {', '.join(missing)}")


__all__ = ["SNAPSHOT_RELATIONS", "open_snapshot", "open_configured_snapshot", "verify_snapshot"]
