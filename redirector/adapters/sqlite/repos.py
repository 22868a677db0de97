"""
SQLite URL map adapter.

Implements UrlMapRepoPort over a single ``urlmap`` table. Driver errors
are converted to SchemaError / QueryError at this boundary.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from redirector.components.redirects import QueryError, SchemaError, UrlRecord

URLMAP_DDL = """
CREATE TABLE IF NOT EXISTS urlmap (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    shortpath TEXT UNIQUE NOT NULL,
    url TEXT NOT NULL
);
"""


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None


class SQLiteUrlMapRepo(SQLiteRepoBase):
    """SQLite implementation of UrlMapRepoPort."""

    def ensure_schema(self) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.executescript(URLMAP_DDL)
                conn.commit()
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.Error as e:
            raise SchemaError(f"Could not create urlmap table: {e}") from e

    def get_by_shortpath(self, shortpath: str) -> UrlRecord | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT shortpath, url FROM urlmap WHERE shortpath = ? LIMIT 1",
                    (shortpath,),
                ).fetchone()
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.Error as e:
            raise QueryError(f"urlmap lookup failed: {e}") from e

        return self._map_row(row) if row else None

    def save(self, record: UrlRecord) -> UrlRecord:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO urlmap (shortpath, url) VALUES (?, ?)
                    ON CONFLICT(shortpath) DO UPDATE SET url=excluded.url
                    """,
                    (record.shortpath, record.url),
                )
                conn.commit()
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.Error as e:
            raise QueryError(f"urlmap save failed: {e}") from e
        return record

    def delete(self, shortpath: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM urlmap WHERE shortpath = ?", (shortpath,))
                conn.commit()
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.Error as e:
            raise QueryError(f"urlmap delete failed: {e}") from e

    def list_all(self) -> list[UrlRecord]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute(
                    "SELECT shortpath, url FROM urlmap ORDER BY shortpath"
                ).fetchall()
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.Error as e:
            raise QueryError(f"urlmap list failed: {e}") from e
        return [self._map_row(r) for r in rows]

    def ping(self) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("SELECT 1 FROM urlmap LIMIT 1").fetchone()
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.Error as e:
            raise QueryError(f"urlmap unavailable: {e}") from e

    def _map_row(self, row: Any) -> UrlRecord:
        if isinstance(row, dict):
            return UrlRecord(shortpath=row["shortpath"], url=row["url"])
        return UrlRecord(shortpath=row[0], url=row[1])
