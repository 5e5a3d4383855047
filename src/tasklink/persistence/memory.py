"""In-process record store."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import ValidationError

from tasklink.contracts.exceptions import StoreError
from tasklink.contracts.records import RECORD_TYPES, Record, SyncRun, SyncRunStatus, utcnow
from tasklink.contracts.store import RecordStore

R = TypeVar("R", bound=Record)

# Fields never overwritten by an upsert of an existing record.
_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class MemoryRecordStore(RecordStore):
    """Dict-backed store holding one table per record collection.

    Each table maps record id to record; a secondary index maps the unique
    key to the id so upserts are single lookups.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Record]] = {kind.collection: {} for kind in RECORD_TYPES}
        self._keys: dict[str, dict[tuple[object, ...], str]] = {kind.collection: {} for kind in RECORD_TYPES}

    def upsert(self, record: R) -> R:
        table = self._table(type(record))
        keys = self._keys[record.collection]
        existing_id = keys.get(record.unique_key())

        if existing_id is None:
            if record.id in table:
                raise StoreError(f"duplicate {record.collection} id: {record.id}")
            table[record.id] = record
            keys[record.unique_key()] = record.id

            def undo_insert() -> None:
                del table[record.id]
                del keys[record.unique_key()]

            self._commit(undo_insert)
            return record

        changes = {
            name: getattr(record, name)
            for name in record.model_fields_set
            if name not in _IMMUTABLE_FIELDS and name not in record.unique_fields
        }
        return self.update(type(record), existing_id, **changes)

    def get(self, kind: type[R], record_id: str) -> R | None:
        record = self._table(kind).get(record_id)
        return record  # type: ignore[return-value]

    def update(self, kind: type[R], record_id: str, **changes: Any) -> R:
        table = self._table(kind)
        current = table.get(record_id)
        if current is None:
            raise StoreError(f"{kind.collection} record not found: {record_id}")
        if any(name in _IMMUTABLE_FIELDS for name in changes):
            raise StoreError(f"cannot change identity fields of {kind.collection} record {record_id}")
        if isinstance(current, SyncRun) and current.finished:
            raise StoreError(f"sync run {record_id} is finalized as {current.status} and cannot change")

        payload = current.model_dump()
        payload.update(changes)
        payload["updated_at"] = utcnow()
        try:
            updated = kind.model_validate(payload)
        except ValidationError as exc:
            raise StoreError(f"invalid update for {kind.collection} record {record_id}: {exc}") from exc

        keys = self._keys[kind.collection]
        old_key, new_key = current.unique_key(), updated.unique_key()
        if new_key != old_key:
            if new_key in keys:
                raise StoreError(f"unique key conflict in {kind.collection}: {new_key}")
            del keys[old_key]
            keys[new_key] = record_id

        table[record_id] = updated

        def undo_update() -> None:
            table[record_id] = current
            if new_key != old_key:
                del keys[new_key]
                keys[old_key] = record_id

        self._commit(undo_update)
        return updated

    def delete(self, kind: type[R], record_id: str) -> None:
        table = self._table(kind)
        keys = self._keys[kind.collection]
        record = table.pop(record_id, None)
        if record is None:
            raise StoreError(f"{kind.collection} record not found: {record_id}")
        del keys[record.unique_key()]

        def undo_delete() -> None:
            table[record_id] = record
            keys[record.unique_key()] = record_id

        self._commit(undo_delete)

    def list(
        self,
        kind: type[R],
        predicate: Callable[[R], bool] | None = None,
        **equals: Any,
    ) -> list[R]:
        matched: list[R] = []
        for record in self._table(kind).values():
            if any(getattr(record, name) != value for name, value in equals.items()):
                continue
            if predicate is not None and not predicate(record):  # type: ignore[arg-type]
                continue
            matched.append(record)  # type: ignore[arg-type]
        return matched

    def finish_sync_run(self, run_id: str, status: SyncRunStatus, message: str) -> SyncRun:
        if status is SyncRunStatus.RUNNING:
            raise StoreError("a sync run cannot be finalized as RUNNING")
        run = self.get(SyncRun, run_id)
        if run is None:
            raise StoreError(f"sync run not found: {run_id}")
        if run.finished:
            raise StoreError(f"sync run {run_id} is already finalized as {run.status}")
        return self.update(SyncRun, run_id, status=status, message=message, finished_at=utcnow())

    def _table(self, kind: type[Record]) -> dict[str, Record]:
        table = self._tables.get(kind.collection)
        if table is None:
            raise StoreError(f"unknown record type: {kind.__name__}")
        return table

    def _commit(self, undo: Callable[[], None]) -> None:
        # A mutation that cannot be persisted is reverted in memory too.
        try:
            self._changed()
        except StoreError:
            undo()
            raise

    def _changed(self) -> None:
        """Hook for persistent subclasses; called after every mutation."""
