from __future__ import annotations

import json
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .base import PersistenceError, Store, UpsertResult


class SQLiteStore(Store):
    """Document store keyed by ``(collection, id)`` on top of SQLite."""

    def __init__(self, db_path: str) -> None:
        self.db_path = Path(db_path)

    def init_db(self) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(self._connect()) as connection:
                connection.execute(
                    """
                    CREATE TABLE IF NOT EXISTS documents (
                        collection TEXT NOT NULL,
                        id TEXT NOT NULL,
                        first_seen_at TEXT NOT NULL,
                        document TEXT NOT NULL,
                        PRIMARY KEY (collection, id)
                    )
                    """
                )
                connection.commit()
        except (OSError, sqlite3.Error) as exc:
            raise PersistenceError(f"cannot initialize store at {self.db_path}: {exc}") from exc

    def upsert_if_absent(
        self,
        collection: str,
        record_id: str,
        document: dict[str, Any],
    ) -> UpsertResult:
        now = datetime.now(timezone.utc).isoformat()
        try:
            with closing(self._connect()) as connection:
                cursor = connection.execute(
                    """
                    INSERT INTO documents (collection, id, first_seen_at, document)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(collection, id) DO NOTHING
                    """,
                    (collection, record_id, now, json.dumps(document, sort_keys=True)),
                )
                inserted = cursor.rowcount == 1
                connection.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"failed to write {collection}/{record_id}: {exc}") from exc

        return UpsertResult.INSERTED if inserted else UpsertResult.SKIPPED

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        try:
            with closing(self._connect()) as connection:
                row = connection.execute(
                    "SELECT document FROM documents WHERE collection = ? AND id = ?",
                    (collection, record_id),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"failed to read {collection}/{record_id}: {exc}") from exc

        if row is None:
            return None
        return json.loads(row["document"])

    def count(self, collection: str) -> int:
        try:
            with closing(self._connect()) as connection:
                row = connection.execute(
                    "SELECT COUNT(*) AS total FROM documents WHERE collection = ?",
                    (collection,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"failed to count {collection}: {exc}") from exc

        return int(row["total"])

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        return connection
