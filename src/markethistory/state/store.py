"""Snapshot store contract used by the benchmark loader."""

from __future__ import annotations

from typing import Any, Protocol

SNAPSHOT_VERSION = 1


def snapshot_key(name: str) -> str:
    """Versioned key so stored payload shapes can be migrated later."""
    return f"markethistory-cache:{name}:v{SNAPSHOT_VERSION}"


class SnapshotStore(Protocol):
    """Persistence API for last-good payloads."""

    def save(self, name: str, payload: Any) -> None:
        """Persist a JSON-serializable payload under `name`."""

    def load(self, name: str) -> Any | None:
        """Return the stored payload, or None when absent or unreadable."""

    def close(self) -> None:
        """Close persistence resources."""


class NoopSnapshotStore:
    """Snapshot store used when persistence is disabled."""

    def save(self, name: str, payload: Any) -> None:
        _ = (name, payload)

    def load(self, name: str) -> Any | None:
        _ = name
        return None

    def close(self) -> None:
        return None
