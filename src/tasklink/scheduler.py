"""Per-user automatic fetch-and-sync scheduling."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from tasklink.contracts.exceptions import TasklinkError
from tasklink.contracts.priority import PriorityBucketConfig
from tasklink.contracts.records import SyncSchedule
from tasklink.contracts.sync import FetchOptions, SyncResult
from tasklink.engine.progress import LoggingSyncProgress
from tasklink.sdk import Tasklink

_LOG = logging.getLogger(__name__)

DEFAULT_INTERVAL_MINUTES = 60


class AutoSyncScheduler:
    """Runs fetch-then-sync cycles for every user whose schedule is due.

    Schedules live in the record store as :class:`SyncSchedule` records, so
    each user carries their own interval, fetch window and priority buckets.
    At most one cycle per user is in flight at a time.
    """

    def __init__(self, tasklink: Tasklink, *, clock: Callable[[], datetime] | None = None) -> None:
        self._tasklink = tasklink
        self._clock = clock or (lambda: datetime.now(UTC))
        self._locks: dict[str, asyncio.Lock] = {}

    def configure(
        self,
        user_id: str,
        *,
        enabled: bool,
        interval_minutes: int | None = None,
        fetch_options: FetchOptions | None = None,
        priority_settings: PriorityBucketConfig | None = None,
    ) -> SyncSchedule:
        """Create or update *user_id*'s schedule; omitted settings keep their stored values."""
        changes: dict[str, object] = {"enabled": enabled}
        if interval_minutes is not None:
            changes["interval_minutes"] = interval_minutes if interval_minutes > 0 else DEFAULT_INTERVAL_MINUTES
        if fetch_options is not None:
            changes["fetch_options"] = fetch_options
        if priority_settings is not None:
            changes["priority_settings"] = priority_settings
        schedule = self._tasklink.store.upsert(SyncSchedule(user_id=user_id, **changes))
        _LOG.info(
            "Auto-sync for user %s %s (every %d minute(s))",
            user_id,
            "enabled" if schedule.enabled else "disabled",
            schedule.interval_minutes,
        )
        return schedule

    def get_schedule(self, user_id: str) -> SyncSchedule | None:
        schedules = self._tasklink.store.list(SyncSchedule, user_id=user_id)
        return schedules[0] if schedules else None

    def due_schedules(self, now: datetime | None = None) -> list[SyncSchedule]:
        now = now or self._clock()
        return [
            schedule
            for schedule in self._tasklink.store.list(SyncSchedule, enabled=True)
            if schedule.last_run_at is None
            or schedule.last_run_at + timedelta(minutes=schedule.interval_minutes) <= now
        ]

    async def run_user(self, user_id: str) -> SyncResult | None:
        """Fetch then sync every mapped course of *user_id*.

        Returns ``None`` when a cycle for the user is already running or when
        the cycle failed; failures are logged, never raised.
        """
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        if lock.locked():
            _LOG.info("Auto-sync for user %s already running; skipping", user_id)
            return None

        async with lock:
            schedule = self.get_schedule(user_id) or SyncSchedule(user_id=user_id)
            progress = LoggingSyncProgress(user_id)
            try:
                await self._tasklink.run_fetch_cycle(user_id, schedule.fetch_options, progress=progress)
                return await self._tasklink.run_sync_cycle(
                    user_id,
                    self._tasklink.mapped_course_ids(user_id),
                    schedule.priority_settings,
                    progress=progress,
                )
            except TasklinkError as exc:
                _LOG.error("Auto-sync for user %s failed: %s", user_id, exc)
                return None
            finally:
                # Stamped even on failure so a broken account is retried next interval, not every poll.
                if self.get_schedule(user_id) is not None:
                    self._tasklink.store.upsert(SyncSchedule(user_id=user_id, last_run_at=self._clock()))

    async def run_pending(self, now: datetime | None = None) -> dict[str, SyncResult | None]:
        results: dict[str, SyncResult | None] = {}
        for schedule in self.due_schedules(now):
            results[schedule.user_id] = await self.run_user(schedule.user_id)
        return results

    async def run_forever(self, poll_seconds: float = 30.0) -> None:
        while True:
            await self.run_pending()
            await asyncio.sleep(poll_seconds)
