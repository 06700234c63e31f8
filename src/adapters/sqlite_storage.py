"""SQLite storage adapter.

Implements the core KeyValueStorePort using a simple SQLite database.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from typing import Optional


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the KeyValueStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - kv: JSON documents keyed by a fixed name (the watermark record)
        """

        with self._connect() as conn:
            # kv keeps one JSON document per key so the bot can restart
            # without reacting to messages it already handled.
            # Fields:
            # - key: fixed record name (PRIMARY KEY)
            # - value: JSON-encoded document, e.g. {"timestamp": 1234.0}
            # - updated_at: last write time, for debugging
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
                """
            )

    def get_item(self, key: str) -> Optional[dict]:
        """Return the stored document for a key, if any."""

        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM kv WHERE key = ?",
                (key,),
            ).fetchone()
        return json.loads(row["value"]) if row else None

    def set_item(self, key: str, value: dict) -> None:
        """Upsert the document for a key."""

        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, json.dumps(value), now.isoformat()),
            )
