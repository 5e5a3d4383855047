"""Tests for the Tasklink SDK composition root."""

from __future__ import annotations

import json
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

import pytest

from tasklink import (
    Assignment,
    CanvasAccount,
    ConfigError,
    Course,
    FetchOptions,
    JsonRecordStore,
    MemoryRecordStore,
    PriorityBucketConfig,
    PriorityRange,
    SyncRun,
    SyncRunStatus,
    SyncSchedule,
    Tasklink,
    TasklinkConfig,
    TodoistAccount,
    load_config,
)
from tasklink.contracts.exceptions import AuthenticationError
from tests.fakes.canvas import FakeCanvas
from tests.fakes.clock import USER_ID, fixed_clock
from tests.fakes.todoist import FakeTodoist


def _write_config(tmp_path: Path, payload: dict) -> Path:
    path = tmp_path / "tasklink.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadConfig:
    def test_resolves_store_path_against_config_dir(self, tmp_path: Path) -> None:
        path = _write_config(
            tmp_path,
            {
                "user_id": "alice",
                "store_path": "data/store.json",
                "canvas_base_url": "https://canvas.test",
                "fetch": {"look_ahead_days": 14, "include_undated": False},
                "priority": {"b1": {"to": 1, "priority": 4}},
            },
        )

        config = load_config(path)

        assert config.user_id == "alice"
        assert config.store_path == (tmp_path / "data" / "store.json").resolve()
        assert config.fetch == FetchOptions(look_ahead_days=14, include_undated=False)
        assert config.priority.thresholds() == (1, 3, 4)

    def test_absolute_store_path_is_kept(self, tmp_path: Path) -> None:
        absolute = tmp_path / "elsewhere" / "store.json"
        config = load_config(_write_config(tmp_path, {"store_path": str(absolute)}))
        assert config.store_path == absolute

    def test_missing_file_raises_config_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="failed reading config file"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json_raises_config_error(self, tmp_path: Path) -> None:
        path = tmp_path / "tasklink.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError, match="invalid JSON"):
            load_config(path)

    def test_invalid_values_raise_config_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="invalid config"):
            load_config(_write_config(tmp_path, {"max_retries": 99}))


class TestAccounts:
    @pytest.mark.asyncio
    async def test_connect_canvas_with_explicit_token(self, store: MemoryRecordStore, config: TasklinkConfig) -> None:
        tasklink = Tasklink(store=store, config=config)

        account = await tasklink.connect_canvas(USER_ID, base_url="https://canvas.test/", token="tok")

        assert account.base_url == "https://canvas.test"
        assert store.list(CanvasAccount, user_id=USER_ID) == [account]

    @pytest.mark.asyncio
    async def test_connect_resolves_tokens_from_environment(
        self, store: MemoryRecordStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CANVAS_TOKEN", "env-canvas")
        monkeypatch.setenv("TODOIST_TOKEN", "env-todoist")
        config = TasklinkConfig(user_id=USER_ID, canvas_base_url="https://canvas.test")
        tasklink = Tasklink(store=store, config=config)

        canvas = await tasklink.connect_canvas(USER_ID)
        todoist = await tasklink.connect_todoist(USER_ID)

        assert canvas.access_token == "env-canvas"
        assert todoist.access_token == "env-todoist"

    @pytest.mark.asyncio
    async def test_reconnect_replaces_credentials(self, store: MemoryRecordStore, config: TasklinkConfig) -> None:
        tasklink = Tasklink(store=store, config=config)
        first = await tasklink.connect_todoist(USER_ID, token="old")
        second = await tasklink.connect_todoist(USER_ID, token="new")

        assert second.id == first.id
        assert [a.access_token for a in store.list(TodoistAccount)] == ["new"]

    @pytest.mark.asyncio
    async def test_connect_canvas_requires_base_url(self, store: MemoryRecordStore, config: TasklinkConfig) -> None:
        with pytest.raises(ConfigError, match="base URL"):
            await Tasklink(store=store, config=config).connect_canvas(USER_ID, token="tok")

    @pytest.mark.asyncio
    async def test_connect_without_token_source_fails(
        self, store: MemoryRecordStore, config: TasklinkConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("TODOIST_TOKEN", raising=False)
        with pytest.raises(AuthenticationError):
            await Tasklink(store=store, config=config).connect_todoist(USER_ID)

    @pytest.mark.asyncio
    async def test_cycles_require_connected_accounts(self, store: MemoryRecordStore, config: TasklinkConfig) -> None:
        tasklink = Tasklink(store=store, config=config)

        with pytest.raises(ConfigError, match="Canvas configuration not found"):
            await tasklink.run_fetch_cycle(USER_ID)
        with pytest.raises(ConfigError, match="Todoist configuration not found"):
            await tasklink.run_sync_cycle(USER_ID)
        with pytest.raises(ConfigError, match="Todoist configuration not found"):
            await tasklink.list_projects(USER_ID)
        assert store.list(SyncRun) == []


class TestCycles:
    @pytest.mark.asyncio
    async def test_fetch_then_sync_mapped_courses(
        self, tasklink: Tasklink, fake_canvas: FakeCanvas, fake_todoist: FakeTodoist
    ) -> None:
        fake_canvas.add_course("101", "Biology")
        fake_canvas.add_course("202", "Chemistry")
        fake_canvas.add_assignment("101", "1", "Lab report", due_at="2024-01-16T07:59:59Z")
        fake_canvas.add_assignment("202", "2", "Titration", due_at="2024-01-18T20:00:00Z")

        fetched = await tasklink.run_fetch_cycle(USER_ID)
        tasklink.map_course_project(USER_ID, "101", "p1")
        synced = await tasklink.run_sync_cycle(USER_ID)

        assert fetched.courses_processed == 2
        assert fetched.assignments_upserted == 2
        assert fake_canvas.entered == fake_canvas.exited == 1
        assert synced.created == 1
        [task] = fake_todoist.tasks.values()
        assert (task.content, task.project_id, task.due_date, task.priority) == (
            "Lab report",
            "p1",
            date(2024, 1, 15),
            4,
        )

    @pytest.mark.asyncio
    async def test_fetch_uses_configured_window_by_default(
        self, store: MemoryRecordStore, fake_canvas: FakeCanvas
    ) -> None:
        config = TasklinkConfig(user_id=USER_ID, fetch=FetchOptions(include_undated=False))
        store.upsert(CanvasAccount(user_id=USER_ID, base_url="https://canvas.test", access_token="tok"))
        tasklink = Tasklink(store=store, config=config, source_factory=lambda account: fake_canvas, clock=fixed_clock)
        fake_canvas.add_course("101", "Biology")
        fake_canvas.add_assignment("101", "1", "Undated")

        result = await tasklink.run_fetch_cycle(USER_ID)

        assert result.assignments_upserted == 0

    @pytest.mark.asyncio
    async def test_sync_uses_supplied_bucket_config(
        self, tasklink: Tasklink, store: MemoryRecordStore, fake_todoist: FakeTodoist
    ) -> None:
        course = store.upsert(Course(user_id=USER_ID, canvas_course_id="101", name="Bio", todoist_project_id="p1"))
        store.upsert(
            Assignment(course_id=course.id, canvas_assignment_id="1", name="Far", due_date=date(2024, 3, 1))
        )
        buckets = PriorityBucketConfig(b4=PriorityRange(enabled=True, priority=1))

        await tasklink.run_sync_cycle(USER_ID, [course.id], buckets)

        [task] = fake_todoist.tasks.values()
        assert task.priority == 1

    @pytest.mark.asyncio
    async def test_list_projects(self, tasklink: Tasklink, fake_todoist: FakeTodoist) -> None:
        fake_todoist.add_project("p1", "School")
        assert [p.name for p in await tasklink.list_projects(USER_ID)] == ["School"]


class TestQueries:
    def test_courses_sorted_by_name_and_scoped_to_user(self, tasklink: Tasklink, store: MemoryRecordStore) -> None:
        store.upsert(Course(user_id=USER_ID, canvas_course_id="2", name="zoology"))
        store.upsert(Course(user_id=USER_ID, canvas_course_id="1", name="Algebra"))
        store.upsert(Course(user_id="other", canvas_course_id="3", name="Botany"))

        assert [c.name for c in tasklink.list_courses(USER_ID)] == ["Algebra", "zoology"]

    def test_map_and_clear_project(self, tasklink: Tasklink, store: MemoryRecordStore) -> None:
        course = store.upsert(Course(user_id=USER_ID, canvas_course_id="101", name="Bio"))

        mapped = tasklink.map_course_project(USER_ID, course.id, "p1")
        assert mapped.todoist_project_id == "p1"
        assert tasklink.mapped_course_ids(USER_ID) == [course.id]

        cleared = tasklink.map_course_project(USER_ID, "101", "")
        assert cleared.todoist_project_id is None
        assert tasklink.mapped_course_ids(USER_ID) == []

    def test_map_rejects_other_users_course(self, tasklink: Tasklink, store: MemoryRecordStore) -> None:
        course = store.upsert(Course(user_id="other", canvas_course_id="101", name="Bio"))
        with pytest.raises(ConfigError, match="Course not found"):
            tasklink.map_course_project(USER_ID, course.id, "p1")

    def test_assignments_ordered_by_due_date_with_undated_last(
        self, tasklink: Tasklink, store: MemoryRecordStore
    ) -> None:
        course = store.upsert(Course(user_id=USER_ID, canvas_course_id="101", name="Bio"))
        foreign = store.upsert(Course(user_id="other", canvas_course_id="101", name="Bio"))
        base = date(2024, 1, 20)
        for canvas_id, due in [("late", base + timedelta(days=5)), ("none", None), ("early", base)]:
            store.upsert(Assignment(course_id=course.id, canvas_assignment_id=canvas_id, name=canvas_id, due_date=due))
        store.upsert(Assignment(course_id=foreign.id, canvas_assignment_id="x", name="x", due_date=base))

        assignments = tasklink.list_assignments(USER_ID)

        assert [a.name for a in assignments] == ["early", "late", "none"]
        assert [a.name for a in tasklink.list_assignments(USER_ID, limit=1)] == ["early"]

    def test_sync_runs_newest_first(self, tasklink: Tasklink, store: MemoryRecordStore) -> None:
        for day in (1, 3, 2):
            store.upsert(SyncRun(user_id=USER_ID, started_at=datetime(2024, 1, day, tzinfo=UTC)))
        store.upsert(SyncRun(user_id="other", started_at=datetime(2024, 1, 9, tzinfo=UTC)))

        runs = tasklink.list_sync_runs(USER_ID)

        assert [run.started_at.day for run in runs] == [3, 2, 1]
        assert len(tasklink.list_sync_runs(USER_ID, limit=2)) == 2


class TestStatus:
    def test_reports_accounts_counts_and_schedule(self, tasklink: Tasklink, store: MemoryRecordStore) -> None:
        mapped = store.upsert(Course(user_id=USER_ID, canvas_course_id="101", name="Bio", todoist_project_id="p1"))
        store.upsert(Course(user_id=USER_ID, canvas_course_id="102", name="Chem"))
        foreign = store.upsert(Course(user_id="other", canvas_course_id="101", name="Bio"))
        for canvas_id in ("1", "2"):
            store.upsert(Assignment(course_id=mapped.id, canvas_assignment_id=canvas_id, name=canvas_id))
        store.upsert(Assignment(course_id=foreign.id, canvas_assignment_id="x", name="x"))
        store.upsert(SyncRun(user_id=USER_ID, started_at=datetime(2024, 1, 1, tzinfo=UTC)))
        latest = store.upsert(SyncRun(user_id=USER_ID, started_at=datetime(2024, 1, 2, tzinfo=UTC)))
        store.upsert(
            SyncSchedule(
                user_id=USER_ID,
                enabled=True,
                interval_minutes=15,
                last_run_at=datetime(2024, 1, 2, tzinfo=UTC),
            )
        )

        status = tasklink.status(USER_ID)

        assert status.canvas.configured
        assert status.canvas.base_url == "https://canvas.test"
        assert status.todoist.configured
        assert (status.courses_count, status.mapped_courses_count, status.assignments_count) == (2, 1, 2)
        assert status.auto_sync.enabled
        assert status.auto_sync.interval_minutes == 15
        assert status.auto_sync.last_run_at == datetime(2024, 1, 2, tzinfo=UTC)
        assert status.last_sync_run is not None
        assert status.last_sync_run.id == latest.id

    def test_unconnected_user_falls_back_to_configured_interval(self, tasklink: Tasklink) -> None:
        status = tasklink.status("newcomer")

        assert not status.canvas.configured
        assert status.canvas.base_url is None
        assert not status.todoist.configured
        assert status.courses_count == status.assignments_count == 0
        assert not status.auto_sync.enabled
        assert status.auto_sync.interval_minutes == 60
        assert status.last_sync_run is None


@pytest.mark.asyncio
async def test_from_config_uses_json_store(tmp_path: Path) -> None:
    config = TasklinkConfig(user_id=USER_ID, store_path=tmp_path / "store.json")
    tasklink = Tasklink.from_config(config)

    assert isinstance(tasklink.store, JsonRecordStore)
    await tasklink.connect_todoist(USER_ID, token="tok")

    reopened = Tasklink.from_config(config)
    assert [a.user_id for a in reopened.store.list(TodoistAccount)] == [USER_ID]


@pytest.mark.asyncio
async def test_failed_sync_cycle_leaves_error_run(
    tasklink: Tasklink, store: MemoryRecordStore, fake_todoist: FakeTodoist
) -> None:
    async def explode(project_id: str):  # type: ignore[no-untyped-def]
        raise RuntimeError("boom")

    fake_todoist.list_tasks = explode  # type: ignore[method-assign]
    store.upsert(Course(user_id=USER_ID, canvas_course_id="101", name="Bio", todoist_project_id="p1"))

    with pytest.raises(Exception, match="boom"):
        await tasklink.run_sync_cycle(USER_ID)

    [run] = tasklink.list_sync_runs(USER_ID)
    assert run.status is SyncRunStatus.ERROR
