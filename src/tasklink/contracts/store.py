"""Record store contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar

from tasklink.contracts.records import Record, SyncRun, SyncRunStatus

R = TypeVar("R", bound=Record)


class RecordStore(ABC):
    """Keyed record storage used by the fetch and sync engines.

    ``upsert`` is create-or-update by the record's unique key. On update only
    the fields explicitly set on the incoming model are written, so an
    upsert from a fetch never clobbers link fields it did not mention.
    """

    @abstractmethod
    def upsert(self, record: R) -> R: ...  # pragma: no cover

    @abstractmethod
    def get(self, kind: type[R], record_id: str) -> R | None: ...  # pragma: no cover

    @abstractmethod
    def update(self, kind: type[R], record_id: str, **changes: Any) -> R: ...  # pragma: no cover

    @abstractmethod
    def delete(self, kind: type[R], record_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def list(
        self,
        kind: type[R],
        predicate: Callable[[R], bool] | None = None,
        **equals: Any,
    ) -> list[R]: ...  # pragma: no cover

    @abstractmethod
    def finish_sync_run(self, run_id: str, status: SyncRunStatus, message: str) -> SyncRun:
        """Finalize a RUNNING sync run; finalizing twice is an error."""
        ...  # pragma: no cover
