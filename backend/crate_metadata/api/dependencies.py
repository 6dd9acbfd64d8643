"""Shared FastAPI dependencies."""

from __future__ import annotations

import threading
from functools import lru_cache

from crate_metadata.core.config import Settings, get_settings
from crate_metadata.db.lookup import SQLiteCrateLookup
from crate_metadata.db.snapshot import open_configured_snapshot, verify_snapshot
from crate_metadata.db.sqlite import SQLiteDatabase

_DB: SQLiteDatabase | None = None
_LOOKUP: SQLiteCrateLookup | None = None
_LOCK = threading.Lock()


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_database() -> SQLiteDatabase:
    global _DB
    if _DB is None:
        # sync dependencies run on the threadpool; only one request may open the handle
        with _LOCK:
            if _DB is None:
                db = open_configured_snapshot(get_app_settings())
                try:
                    verify_snapshot(db)
                except Exception:
                    db.close()
                    raise
                _DB = db
    return _DB


def get_lookup() -> SQLiteCrateLookup:
    global _LOOKUP
    db = get_database()
    if _LOOKUP is None:
        with _LOCK:
            if _LOOKUP is None:
                _LOOKUP = SQLiteCrateLookup(db)
    return _LOOKUP


def reset_state() -> None:
    """Close the cached snapshot handle and forget cached settings."""
    global _DB, _LOOKUP
    with _LOCK:
        if _DB is not None:
            _DB.close()
        _DB = None
        _LOOKUP = None
    get_app_settings.cache_clear()
    get_settings.cache_clear()


__all__ = [
    "get_app_settings",
    "get_database",
    "get_lookup",
    "reset_state",
]
