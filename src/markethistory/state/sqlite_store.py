"""SQLite snapshot store for last-good benchmark results."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from markethistory.state.store import snapshot_key

logger = logging.getLogger("markethistory.state")


class SqliteSnapshotStore:
    """SQLite-backed implementation of snapshot persistence."""

    def __init__(self, db_path: str) -> None:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.connection = sqlite3.connect(path)
        self.connection.row_factory = sqlite3.Row
        self._initialize_schema()

    def save(self, name: str, payload: Any) -> None:
        self.connection.execute(
            """
            INSERT OR REPLACE INTO snapshots(name, saved_ts, payload)
            VALUES(?, ?, ?)
            """,
            (snapshot_key(name), self._utc_now(), json.dumps(payload, sort_keys=True)),
        )
        self.connection.commit()

    def load(self, name: str) -> Any | None:
        row = self.connection.execute(
            """
            SELECT payload
            FROM snapshots
            WHERE name = ?
            """,
            (snapshot_key(name),),
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["payload"])
        except (TypeError, ValueError):
            logger.warning("Ignoring unreadable snapshot %s", name)
            return None

    def close(self) -> None:
        self.connection.close()

    def _initialize_schema(self) -> None:
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS snapshots(
                name TEXT PRIMARY KEY,
                saved_ts TEXT NOT NULL,
                payload TEXT NOT NULL
            )
            """
        )
        self.connection.commit()

    @staticmethod
    def _utc_now() -> str:
        return datetime.now(tz=UTC).isoformat()
