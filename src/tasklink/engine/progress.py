"""Phase observers for the fetch and sync cycles.

Fetch reports ``Courses`` then ``Assignments`` (one item per course); sync
reports ``Index`` (one item per Todoist project) then ``Sync`` (one item per
assignment). Observers must not raise.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

_LOG = logging.getLogger(__name__)


class SyncProgress(ABC):
    """Observer interface for cycle progress events."""

    @abstractmethod
    def phase_start(self, phase: str, total: int | None = None) -> None:
        """A phase is starting. *total* is ``None`` for indeterminate phases."""
        ...  # pragma: no cover

    @abstractmethod
    def item_done(self, phase: str) -> None:
        """One item within *phase* has completed."""
        ...  # pragma: no cover

    @abstractmethod
    def phase_done(self, phase: str) -> None:
        """The *phase* has finished successfully."""
        ...  # pragma: no cover

    @abstractmethod
    def phase_error(self, phase: str, error: BaseException) -> None:
        """The *phase* was interrupted by *error*."""
        ...  # pragma: no cover


class NullSyncProgress(SyncProgress):
    """No-op implementation used when no progress display is requested."""

    def phase_start(self, phase: str, total: int | None = None) -> None:
        pass

    def item_done(self, phase: str) -> None:
        pass

    def phase_done(self, phase: str) -> None:
        pass

    def phase_error(self, phase: str, error: BaseException) -> None:
        pass


class LoggingSyncProgress(SyncProgress):
    """Reports phases through :mod:`logging`; used by unattended scheduled cycles."""

    def __init__(self, user_id: str) -> None:
        self._user_id = user_id
        self._counts: dict[str, int] = {}

    def phase_start(self, phase: str, total: int | None = None) -> None:
        self._counts[phase] = 0
        _LOG.debug("[%s] %s started (total=%s)", self._user_id, phase, total)

    def item_done(self, phase: str) -> None:
        self._counts[phase] = self._counts.get(phase, 0) + 1

    def phase_done(self, phase: str) -> None:
        _LOG.info("[%s] %s done (%d item(s))", self._user_id, phase, self._counts.get(phase, 0))

    def phase_error(self, phase: str, error: BaseException) -> None:
        _LOG.warning("[%s] %s failed: %s", self._user_id, phase, error)
