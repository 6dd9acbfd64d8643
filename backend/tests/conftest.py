"""Test fixtures for crate metadata queries."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from crate_metadata.db.lookup import SQLiteCrateLookup  # noqa: E402
from crate_metadata.db.sqlite import SQLiteDatabase  # noqa: E402
from crate_metadata.query.errors import LookupFailure  # noqa: E402

CRATES = [
    # id, name, description, downloads, homepage, repository, updated_at
    ("1", "bevy", "A data-driven game engine", "1000", "https://bevyengine.org", "https://github.com/bevyengine/bevy", "2023-01-10"),
    ("2", "bevy_egui", "egui integration for bevy", "250", "", "https://github.com/mvlabat/bevy_egui", "2023-01-12"),
    ("3", "serde", "Serialization framework", "n/a", "https://serde.rs", "https://github.com/serde-rs/serde", "2022-12-01"),
    ("4", "bevy_render", "Rendering for bevy", "-4", "https://bevyengine.org", "https://github.com/bevyengine/bevy", "2023-01-10"),
    ("5", "lonely", "Never published", "0", "", "", "2021-05-05"),
]

VERSIONS = [
    # id, crate_id, num, license
    ("v1", "1", "0.8.1", "MIT OR Apache-2.0"),
    ("v2", "1", "0.9.0", "MIT OR Apache-2.0"),
    ("v3", "1", "0.10.0", "MIT OR Apache-2.0"),
    ("v10", "2", "0.16.0", "MIT"),
    ("v11", "2", "0.17.1", "MIT"),
    ("v20", "3", "1.0.150", "MIT OR Apache-2.0"),
    ("v30", "4", "0.9.1", "MIT OR Apache-2.0"),
]

DEPENDENCIES = [
    # id, version_id, crate_id, req, kind
    ("d1", "v2", "4", "^0.9.0", "0"),
    ("d2", "v2", "3", "^1", "2"),
    ("d3", "v2", "3", "^1.0.100", "1"),
    ("d4", "v3", "4", "^0.10", "0"),
    ("d5", "v11", "1", "^0.9", "0"),
    ("d6", "v11", "3", "^1.0", "2"),
    ("d7", "v10", "1", "^0.8", "0"),
    ("d8", "v20", "4", "^0.9", "00"),
]

KEYWORDS = [("k1", "game"), ("k2", "engine"), ("k3", "gui")]

CRATES_KEYWORDS = [("1", "k1"), ("1", "k2"), ("2", "k3"), ("2", "k1")]


def build_snapshot(db_path: Path) -> Path:
    with SQLiteDatabase(db_path) as db:
        db.ensure_schema()
        db.executemany(
            "INSERT INTO crates (id, name, description, downloads, homepage, repository, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            CRATES,
        )
        db.executemany("INSERT INTO versions (id, crate_id, num, license) VALUES (?, ?, ?, ?)", VERSIONS)
        db.executemany(
            "INSERT INTO dependencies (id, version_id, crate_id, req, kind) VALUES (?, ?, ?, ?, ?)",
            DEPENDENCIES,
        )
        db.executemany("INSERT INTO keywords (id, keyword) VALUES (?, ?)", KEYWORDS)
        db.executemany("INSERT INTO crates_keywords (crate_id, keyword_id) VALUES (?, ?)", CRATES_KEYWORDS)
    return db_path


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    return build_snapshot(tmp_path / "crates.db")


@pytest.fixture
def lookup(snapshot_path: Path) -> SQLiteCrateLookup:
    db = SQLiteDatabase(snapshot_path, read_only=True)
    yield SQLiteCrateLookup(db)
    db.close()


@pytest.fixture(autouse=True)
def reset_state(snapshot_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("CRATEQ_DB_PATH", str(snapshot_path))
    monkeypatch.setenv("CRATEQ_LOG_LEVEL", "ERROR")
    monkeypatch.delenv("CRATEQ_CONFIG", raising=False)
    monkeypatch.delenv("CRATEQ_READ_ONLY", raising=False)
    monkeypatch.delenv("CRATEQ_DEFAULT_TARGET", raising=False)

    from crate_metadata.api import dependencies as deps

    deps.reset_state()
    yield
    deps.reset_state()


class FaultyLookup:
    """CrateLookup fake that fails selected primitives and delegates the rest."""

    def __init__(self, inner: SQLiteCrateLookup, fail: dict[str, set[str] | None]) -> None:
        self._inner = inner
        self._fail = fail

    def __getattr__(self, name: str):
        target = getattr(self._inner, name)
        if name not in self._fail:
            return target

        def wrapped(*args):
            only = self._fail[name]
            if only is None or (args and args[0] in only):
                raise LookupFailure(f"{name} unavailable")
            return target(*args)

        return wrapped


@pytest.fixture
def make_faulty(lookup: SQLiteCrateLookup):
    """Build a FaultyLookup; ``fail`` maps a primitive to the first-argument values that fail (None: always)."""

    def factory(**fail: set[str] | None) -> FaultyLookup:
        return FaultyLookup(lookup, fail)

    return factory
