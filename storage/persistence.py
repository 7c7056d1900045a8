"""Key-value persistence for the active filter state."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol


class PersistenceAdapter(Protocol):
    """Storage backend contract for one persisted JSON blob."""

    def load(self) -> Any:
        """Return the stored JSON value, ``None`` when nothing is stored.

        May raise ``ValueError`` on malformed content or ``OSError`` when unreadable.
        """
        ...

    def save(self, payload: Any) -> None:
        ...


class InMemoryPersistence:
    """Persistence backed by a raw JSON string held in memory."""

    def __init__(self, raw: str | None = None) -> None:
        self.raw = raw
        self.writes = 0

    def load(self) -> Any:
        if self.raw is None:
            return None
        return json.loads(self.raw)

    def save(self, payload: Any) -> None:
        self.raw = json.dumps(payload, sort_keys=True)
        self.writes += 1


class JSONFilePersistence:
    """Persistence in ``<directory>/<storage_key>.json``."""

    def __init__(self, directory: Path, storage_key: str = "dashboard_filters") -> None:
        self._path = directory / f"{storage_key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Any:
        if not self._path.exists():
            return None
        return json.loads(self._path.read_text(encoding="utf-8"))

    def save(self, payload: Any) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(payload, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)
