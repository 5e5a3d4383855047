"""Persisted record contracts.

Every record carries an opaque ``id`` plus the tuple of fields forming its
unique key; :class:`~tasklink.contracts.store.RecordStore` implementations
upsert by that key.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import ClassVar
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from tasklink.contracts.priority import PriorityBucketConfig
from tasklink.contracts.sync import FetchOptions


def utcnow() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid4().hex


class Record(BaseModel):
    collection: ClassVar[str]
    unique_fields: ClassVar[tuple[str, ...]] = ("id",)

    id: str = Field(default_factory=_new_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def unique_key(self) -> tuple[object, ...]:
        return tuple(getattr(self, name) for name in self.unique_fields)


class CanvasAccount(Record):
    collection: ClassVar[str] = "canvas_accounts"
    unique_fields: ClassVar[tuple[str, ...]] = ("user_id",)

    user_id: str
    base_url: str
    access_token: str = Field(repr=False)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


class TodoistAccount(Record):
    collection: ClassVar[str] = "todoist_accounts"
    unique_fields: ClassVar[tuple[str, ...]] = ("user_id",)

    user_id: str
    access_token: str = Field(repr=False)


class Course(Record):
    collection: ClassVar[str] = "courses"
    unique_fields: ClassVar[tuple[str, ...]] = ("user_id", "canvas_course_id")

    user_id: str
    canvas_course_id: str
    name: str
    todoist_project_id: str | None = None


class Assignment(Record):
    collection: ClassVar[str] = "assignments"
    unique_fields: ClassVar[tuple[str, ...]] = ("course_id", "canvas_assignment_id")

    course_id: str
    canvas_assignment_id: str
    name: str
    description: str | None = None
    due_date: date | None = None
    todoist_task_id: str | None = None
    last_synced_at: datetime | None = None


class SyncRunStatus(StrEnum):
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class SyncRun(Record):
    collection: ClassVar[str] = "sync_runs"

    user_id: str
    started_at: datetime = Field(default_factory=utcnow)
    finished_at: datetime | None = None
    status: SyncRunStatus = SyncRunStatus.RUNNING
    message: str | None = None

    @property
    def finished(self) -> bool:
        return self.status is not SyncRunStatus.RUNNING


class SyncSchedule(Record):
    """Per-user auto-sync settings owned by the scheduler."""

    collection: ClassVar[str] = "sync_schedules"
    unique_fields: ClassVar[tuple[str, ...]] = ("user_id",)

    user_id: str
    enabled: bool = False
    interval_minutes: int = Field(default=60, ge=1)
    fetch_options: FetchOptions = Field(default_factory=FetchOptions)
    priority_settings: PriorityBucketConfig = Field(default_factory=PriorityBucketConfig)
    last_run_at: datetime | None = None


RECORD_TYPES: tuple[type[Record], ...] = (
    CanvasAccount,
    TodoistAccount,
    Course,
    Assignment,
    SyncRun,
    SyncSchedule,
)
