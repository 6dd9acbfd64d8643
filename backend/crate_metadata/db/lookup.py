"""SQLite implementation of the crate lookup capability."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from crate_metadata.db.sqlite import SQLiteDatabase
from crate_metadata.models.entities import (
    DependencyRef,
    DependencyRow,
    PackageRef,
    PackageRow,
    VersionRef,
    VersionRow,
)
from crate_metadata.query.errors import LookupFailure

_DEPENDENCIES_SQL = """
    SELECT dependencies.id, crates.name
    FROM dependencies
    LEFT JOIN crates
        ON dependencies.crate_id = crates.id
    WHERE dependencies.version_id = ?
"""


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise LookupFailure(f"{operation} failed: {exc}") from exc


def _like_pattern(fragment: str) -> str:
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SQLiteCrateLookup:
    """Run the fixed lookup queries against a dump snapshot."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    def versions(self, crate_name: str) -> list[VersionRef]:
        with _translate_errors("versions"):
            rows = self.db.query(
                """
                SELECT versions.id, versions.num
                FROM versions
                LEFT JOIN crates
                    ON versions.crate_id = crates.id
                WHERE crates.name = ?
                ORDER BY versions.num DESC
                """,
                [crate_name],
            )
        return [VersionRef(id=row["id"], num=row["num"]) for row in rows]

    def version_metadata(self, crate_name: str) -> list[VersionRow]:
        with _translate_errors("version_metadata"):
            rows = self.db.query(
                """
                SELECT crates.id AS crate_id, crates.name AS crate_name,
                       versions.license, versions.num, versions.id AS version_id
                FROM versions
                LEFT JOIN crates
                    ON versions.crate_id = crates.id
                WHERE crates.name = ?
                ORDER BY versions.num DESC
                """,
                [crate_name],
            )
        return [
            VersionRow(
                crate_id=row["crate_id"],
                crate_name=row["crate_name"],
                license=row["license"] or "",
                num=row["num"],
                version_id=row["version_id"],
            )
            for row in rows
        ]

    def dependencies(self, version_id: str, kind_code: int | None) -> list[DependencyRef]:
        sql = _DEPENDENCIES_SQL
        params: list[str] = [version_id]
        if kind_code is not None:
            sql += " AND dependencies.kind = ?"
            params.append(str(kind_code))
        with _translate_errors("dependencies"):
            rows = self.db.query(sql, params)
        return [DependencyRef(id=row[0], name=row[1]) for row in rows]

    def dependency_rows(self, version_id: str) -> list[DependencyRow]:
        with _translate_errors("dependency_rows"):
            rows = self.db.query(
                """
                SELECT dependencies.crate_id, crates.name, dependencies.req, dependencies.kind
                FROM dependencies
                LEFT JOIN crates
                    ON crates.id = dependencies.crate_id
                WHERE dependencies.version_id = ?
                """,
                [version_id],
            )
        return [
            DependencyRow(crate_id=row["crate_id"], name=row["name"], req=row["req"], kind=row["kind"])
            for row in rows
        ]

    def keywords(self, crate_id: str) -> list[str]:
        with _translate_errors("keywords"):
            rows = self.db.query(
                """
                SELECT keywords.keyword
                FROM keywords
                LEFT JOIN crates_keywords
                    ON keywords.id = crates_keywords.keyword_id
                WHERE crates_keywords.crate_id = ?
                """,
                [crate_id],
            )
        return [row["keyword"] for row in rows]

    def packages_by_name(self, name: str) -> list[PackageRef]:
        with _translate_errors("packages_by_name"):
            rows = self.db.query("SELECT id, name FROM crates WHERE name = ?", [name])
        return [PackageRef(id=row["id"], name=row["name"]) for row in rows]

    def packages_by_homepage(self, homepage: str, repository: str) -> list[PackageRef]:
        with _translate_errors("packages_by_homepage"):
            rows = self.db.query(
                "SELECT id, name FROM crates WHERE homepage = ? AND repository = ?",
                [homepage, repository],
            )
        return [PackageRef(id=row["id"], name=row["name"]) for row in rows]

    def dependency_targets_like(self, fragment: str) -> list[DependencyRef]:
        with _translate_errors("dependency_targets_like"):
            rows = self.db.query(
                """
                SELECT MIN(dependencies.id) AS id, crates.name
                FROM dependencies
                LEFT JOIN crates
                    ON dependencies.crate_id = crates.id
                WHERE crates.name LIKE ? ESCAPE '\\'
                GROUP BY crates.name
                ORDER BY crates.name
                """,
                [_like_pattern(fragment)],
            )
        return [DependencyRef(id=row["id"], name=row["name"]) for row in rows]

    def requirement(self, crate_id: str, version_id: str, target_id: str) -> str | None:
        with _translate_errors("requirement"):
            row = self.db.query_one(
                """
                SELECT dependencies.req
                FROM dependencies
                LEFT JOIN versions
                    ON dependencies.version_id = versions.id
                WHERE versions.crate_id = ? AND versions.id = ? AND dependencies.crate_id = ?
                """,
                [crate_id, version_id, target_id],
            )
        return None if row is None else row["req"]

    def package(self, crate_name: str) -> PackageRow | None:
        with _translate_errors("package"):
            row = self.db.query_one(
                """
                SELECT id, name, description, downloads, homepage, repository, updated_at
                FROM crates
                WHERE name = ?
                """,
                [crate_name],
            )
        if row is None:
            return None
        return PackageRow(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            downloads=row["downloads"] or "",
            homepage=row["homepage"] or None,
            repository=row["repository"] or None,
            updated_at=row["updated_at"] or "",
        )


__all__ = ["SQLiteCrateLookup"]
