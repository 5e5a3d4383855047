"""Per-user status summary contracts."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from tasklink.contracts.records import SyncRun


class CanvasStatus(BaseModel):
    configured: bool
    base_url: str | None = None


class TodoistStatus(BaseModel):
    configured: bool


class AutoSyncStatus(BaseModel):
    """The user's stored schedule, or the configured interval when none is stored yet."""

    enabled: bool
    interval_minutes: int
    last_run_at: datetime | None = None


class StatusSummary(BaseModel):
    user_id: str
    canvas: CanvasStatus
    todoist: TodoistStatus
    courses_count: int
    mapped_courses_count: int
    assignments_count: int
    auto_sync: AutoSyncStatus
    last_sync_run: SyncRun | None = None
