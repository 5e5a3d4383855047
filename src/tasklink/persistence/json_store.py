"""JSON file-backed record store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tasklink.contracts.exceptions import StoreError
from tasklink.contracts.records import RECORD_TYPES
from tasklink.persistence.memory import MemoryRecordStore

_LOG = logging.getLogger(__name__)

_FORMAT_VERSION = 1


class JsonRecordStore(MemoryRecordStore):
    """Keeps every collection in memory and rewrites *path* after each mutation.

    Writes go to a sibling temporary file that then replaces *path*, so a
    crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._path = path
        self._loading = False
        if path.exists():
            self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        try:
            payload: Any = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"invalid store file: {self._path}") from exc
        if not isinstance(payload, dict):
            raise StoreError(f"invalid store file: {self._path}")

        self._loading = True
        try:
            for kind in RECORD_TYPES:
                for raw in payload.get(kind.collection, []):
                    self.upsert(kind.model_validate(raw))
        except ValidationError as exc:
            raise StoreError(f"invalid record in store file {self._path}: {exc}") from exc
        finally:
            self._loading = False
        _LOG.debug("Loaded record store from %s", self._path)

    def _changed(self) -> None:
        if self._loading:
            return
        snapshot: dict[str, Any] = {"version": _FORMAT_VERSION}
        for kind in RECORD_TYPES:
            snapshot[kind.collection] = [record.model_dump(mode="json") for record in self.list(kind)]

        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise StoreError(f"failed to persist record store: {self._path}") from exc
