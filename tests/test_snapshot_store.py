from __future__ import annotations

from pathlib import Path

from markethistory.state.sqlite_store import SqliteSnapshotStore
from markethistory.state.store import NoopSnapshotStore, snapshot_key


def test_snapshot_store_roundtrip_and_replace(tmp_path: Path) -> None:
    db_path = tmp_path / "state" / "snapshots.db"
    store = SqliteSnapshotStore(str(db_path))

    assert store.load("benchmarks:SP500:12:") is None

    store.save("benchmarks:SP500:12:", [{"id": "SP500", "label": "S&P 500", "data": [100.0]}])
    store.save("benchmarks:SP500:12:", [{"id": "SP500", "label": "S&P 500", "data": [100.0, 99.5]}])
    store.close()

    reopened = SqliteSnapshotStore(str(db_path))
    assert reopened.load("benchmarks:SP500:12:") == [
        {"id": "SP500", "label": "S&P 500", "data": [100.0, 99.5]}
    ]
    reopened.close()


def test_unreadable_snapshot_loads_as_none(tmp_path: Path) -> None:
    store = SqliteSnapshotStore(str(tmp_path / "snapshots.db"))
    store.connection.execute(
        "INSERT INTO snapshots(name, saved_ts, payload) VALUES(?, ?, ?)",
        (snapshot_key("broken"), "2025-01-01T00:00:00+00:00", "{not json"),
    )
    store.connection.commit()

    assert store.load("broken") is None
    store.close()


def test_snapshot_keys_are_versioned() -> None:
    assert snapshot_key("benchmarks") == "markethistory-cache:benchmarks:v1"


def test_noop_store_keeps_nothing() -> None:
    store = NoopSnapshotStore()
    store.save("anything", [1, 2, 3])

    assert store.load("anything") is None
