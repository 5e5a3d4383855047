"""SDK composition root for Tasklink."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tasklink.auth import create_token_resolver
from tasklink.contracts.config import TasklinkConfig
from tasklink.contracts.destination import DestinationClient, RemoteProject
from tasklink.contracts.exceptions import ConfigError
from tasklink.contracts.priority import PriorityBucketConfig
from tasklink.contracts.records import Assignment, CanvasAccount, Course, SyncRun, SyncSchedule, TodoistAccount
from tasklink.contracts.source import SourceClient
from tasklink.contracts.status import AutoSyncStatus, CanvasStatus, StatusSummary, TodoistStatus
from tasklink.contracts.store import RecordStore
from tasklink.contracts.sync import FetchOptions, FetchResult, SyncResult
from tasklink.engine import FetchEngine, SyncEngine
from tasklink.engine.dates import resolve_timezone
from tasklink.engine.progress import SyncProgress
from tasklink.persistence import JsonRecordStore
from tasklink.providers import create_destination_client, create_source_client

SourceFactory = Callable[[CanvasAccount], SourceClient]
DestinationFactory = Callable[[TodoistAccount], DestinationClient]

DEFAULT_ASSIGNMENT_LIMIT = 200
DEFAULT_RUN_LIMIT = 20


def _resolve_path(value: Path, *, base_dir: Path) -> Path:
    if value.is_absolute():
        return value
    return (base_dir / value).resolve()


def load_config(path: str | Path) -> TasklinkConfig:
    """Load and validate config from JSON, resolving the store path against the config directory."""
    config_path = Path(path).expanduser().resolve()

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = TasklinkConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    return parsed.model_copy(
        update={"store_path": _resolve_path(parsed.store_path, base_dir=config_path.parent)}
    )


class Tasklink:
    """Tasklink SDK public API.

    Every operation is scoped to a user id; accounts, courses, assignments
    and sync runs of one user are never visible to another.
    """

    def __init__(
        self,
        *,
        store: RecordStore,
        config: TasklinkConfig,
        source_factory: SourceFactory | None = None,
        destination_factory: DestinationFactory | None = None,
        progress: SyncProgress | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._zone = resolve_timezone(config.institution_timezone)
        self._source_factory = source_factory or self._default_source_factory
        self._destination_factory = destination_factory or self._default_destination_factory
        self._progress = progress
        self._clock = clock or (lambda: datetime.now(UTC))

    @classmethod
    def from_config(cls, config: TasklinkConfig, *, progress: SyncProgress | None = None) -> Tasklink:
        return cls(store=JsonRecordStore(config.store_path), config=config, progress=progress)

    @property
    def config(self) -> TasklinkConfig:
        return self._config

    @property
    def store(self) -> RecordStore:
        return self._store

    async def connect_canvas(
        self,
        user_id: str,
        *,
        base_url: str | None = None,
        token: str | None = None,
    ) -> CanvasAccount:
        """Store the user's Canvas credentials, resolving the token from config when not given."""
        resolved_url = (base_url or self._config.canvas_base_url or "").strip()
        if not resolved_url:
            raise ConfigError("Canvas base URL is required (pass one or set canvas_base_url)")
        resolved_token = token or await create_token_resolver("canvas", self._config).resolve()
        return self._store.upsert(
            CanvasAccount(user_id=user_id, base_url=resolved_url, access_token=resolved_token)
        )

    async def connect_todoist(self, user_id: str, *, token: str | None = None) -> TodoistAccount:
        """Store the user's Todoist token, resolving it from config when not given."""
        resolved_token = token or await create_token_resolver("todoist", self._config).resolve()
        return self._store.upsert(TodoistAccount(user_id=user_id, access_token=resolved_token))

    async def run_fetch_cycle(
        self,
        user_id: str,
        options: FetchOptions | None = None,
        *,
        progress: SyncProgress | None = None,
    ) -> FetchResult:
        account = self._canvas_account(user_id)
        source = self._source_factory(account)
        async with source:
            engine = FetchEngine(
                source,
                self._store,
                zone=self._zone,
                clock=self._clock,
                progress=progress or self._progress,
            )
            return await engine.fetch(user_id, options or self._config.fetch)

    async def run_sync_cycle(
        self,
        user_id: str,
        course_ids: Iterable[str] | None = None,
        bucket_config: PriorityBucketConfig | None = None,
        *,
        progress: SyncProgress | None = None,
    ) -> SyncResult:
        """Reconcile *course_ids* (default: every mapped course) into Todoist."""
        account = self._todoist_account(user_id)
        selected = list(course_ids) if course_ids is not None else self.mapped_course_ids(user_id)
        destination = self._destination_factory(account)
        async with destination:
            engine = SyncEngine(
                destination,
                self._store,
                zone=self._zone,
                clock=self._clock,
                progress=progress or self._progress,
            )
            return await engine.sync(user_id, selected, bucket_config or self._config.priority)

    async def list_projects(self, user_id: str) -> list[RemoteProject]:
        account = self._todoist_account(user_id)
        destination = self._destination_factory(account)
        async with destination:
            return await destination.list_projects()

    def list_courses(self, user_id: str) -> list[Course]:
        courses = self._store.list(Course, user_id=user_id)
        return sorted(courses, key=lambda course: course.name.casefold())

    def find_course(self, user_id: str, course_ref: str) -> Course:
        """Look a course up by stored id or Canvas course id."""
        for course in self._store.list(Course, user_id=user_id):
            if course_ref in (course.id, course.canvas_course_id):
                return course
        raise ConfigError(f"Course not found: {course_ref}")

    def map_course_project(self, user_id: str, course_ref: str, project_id: str | None) -> Course:
        course = self.find_course(user_id, course_ref)
        return self._store.update(Course, course.id, todoist_project_id=project_id or None)

    def mapped_course_ids(self, user_id: str) -> list[str]:
        return [course.id for course in self.list_courses(user_id) if course.todoist_project_id]

    def list_assignments(self, user_id: str, limit: int = DEFAULT_ASSIGNMENT_LIMIT) -> list[Assignment]:
        """Assignments of the user's courses, soonest due first and undated last."""
        course_ids = {course.id for course in self._store.list(Course, user_id=user_id)}
        assignments = self._store.list(Assignment, lambda a: a.course_id in course_ids)
        assignments.sort(key=lambda a: a.created_at, reverse=True)
        assignments.sort(key=lambda a: (a.due_date is None, a.due_date or date.max))
        return assignments[:limit]

    def list_sync_runs(self, user_id: str, limit: int = DEFAULT_RUN_LIMIT) -> list[SyncRun]:
        runs = self._store.list(SyncRun, user_id=user_id)
        runs.sort(key=lambda run: run.started_at, reverse=True)
        return runs[:limit]

    def status(self, user_id: str) -> StatusSummary:
        """Connection, storage and auto-sync overview for *user_id*."""
        canvas = self._store.list(CanvasAccount, user_id=user_id)
        todoist = self._store.list(TodoistAccount, user_id=user_id)
        courses = self._store.list(Course, user_id=user_id)
        course_ids = {course.id for course in courses}
        schedules = self._store.list(SyncSchedule, user_id=user_id)
        runs = self.list_sync_runs(user_id, limit=1)

        if schedules:
            auto_sync = AutoSyncStatus(
                enabled=schedules[0].enabled,
                interval_minutes=schedules[0].interval_minutes,
                last_run_at=schedules[0].last_run_at,
            )
        else:
            auto_sync = AutoSyncStatus(enabled=False, interval_minutes=self._config.auto_sync_minutes)

        return StatusSummary(
            user_id=user_id,
            canvas=CanvasStatus(configured=bool(canvas), base_url=canvas[0].base_url if canvas else None),
            todoist=TodoistStatus(configured=bool(todoist)),
            courses_count=len(courses),
            mapped_courses_count=sum(1 for course in courses if course.todoist_project_id),
            assignments_count=len(self._store.list(Assignment, lambda a: a.course_id in course_ids)),
            auto_sync=auto_sync,
            last_sync_run=runs[0] if runs else None,
        )

    def _canvas_account(self, user_id: str) -> CanvasAccount:
        accounts = self._store.list(CanvasAccount, user_id=user_id)
        if not accounts:
            raise ConfigError("Canvas configuration not found. Connect a Canvas account first.")
        return accounts[0]

    def _todoist_account(self, user_id: str) -> TodoistAccount:
        accounts = self._store.list(TodoistAccount, user_id=user_id)
        if not accounts:
            raise ConfigError("Todoist configuration not found. Connect a Todoist account first.")
        return accounts[0]

    def _default_source_factory(self, account: CanvasAccount) -> SourceClient:
        return create_source_client(account, max_retries=self._config.max_retries)

    def _default_destination_factory(self, account: TodoistAccount) -> DestinationClient:
        return create_destination_client(
            account,
            base_url=self._config.todoist_api_base,
            max_retries=self._config.max_retries,
        )
