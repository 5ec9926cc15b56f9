"""Snapshot store interfaces and implementations."""

from .sqlite_store import SqliteSnapshotStore
from .store import NoopSnapshotStore, SnapshotStore, snapshot_key

__all__ = ["SnapshotStore", "NoopSnapshotStore", "SqliteSnapshotStore", "snapshot_key"]
