"""Assignment-to-Todoist reconciliation engine."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from tasklink.contracts.destination import CreateTaskInput, DestinationClient, UpdateTaskInput
from tasklink.contracts.exceptions import AuthenticationError, ProviderError, SyncError, TasklinkError
from tasklink.contracts.priority import PriorityBucketConfig
from tasklink.contracts.records import Assignment, Course, SyncRun, SyncRunStatus
from tasklink.contracts.store import RecordStore
from tasklink.contracts.sync import AssignmentOutcome, SyncResult
from tasklink.engine.dates import today_in
from tasklink.engine.priority import priority_for
from tasklink.engine.progress import NullSyncProgress, SyncProgress

_LOG = logging.getLogger(__name__)


def task_key(project_id: str, title: str) -> tuple[str, str]:
    return project_id, title.strip()


class TaskIndex:
    """Existing Todoist task ids keyed by ``(project id, trimmed title)``.

    Owned by a single run. Listed tasks keep the first id seen for a title;
    tasks created during the run replace any entry for their key.
    """

    def __init__(self) -> None:
        self._ids: dict[tuple[str, str], str] = {}

    def __len__(self) -> int:
        return len(self._ids)

    def add_listed(self, project_id: str, title: str, task_id: str) -> None:
        self._ids.setdefault(task_key(project_id, title), task_id)

    def add_created(self, project_id: str, title: str, task_id: str) -> None:
        self._ids[task_key(project_id, title)] = task_id

    def lookup(self, project_id: str, title: str) -> str | None:
        return self._ids.get(task_key(project_id, title))


class SyncEngine:
    def __init__(
        self,
        destination: DestinationClient,
        store: RecordStore,
        *,
        zone: ZoneInfo,
        clock: Callable[[], datetime] | None = None,
        progress: SyncProgress | None = None,
    ) -> None:
        self._destination = destination
        self._store = store
        self._zone = zone
        self._clock = clock or (lambda: datetime.now(UTC))
        self._progress: SyncProgress = progress or NullSyncProgress()

    async def sync(self, user_id: str, course_ids: Iterable[str], config: PriorityBucketConfig) -> SyncResult:
        """Run one reconciliation cycle for *user_id* over *course_ids*.

        The SyncRun is created before any Todoist call and finalized exactly
        once. Per-assignment Todoist failures are absorbed into the result.
        A rejected Todoist token, like any other failure, marks the run ERROR
        and propagates, wrapped in :class:`SyncError` unless it already is a
        Tasklink error. Stored task links are left as they were.
        """
        requested = list(dict.fromkeys(course_ids))
        run = self._store.upsert(
            SyncRun(user_id=user_id, message=f"Starting sync for {len(requested)} course(s).")
        )
        result = SyncResult(sync_run_id=run.id)

        try:
            await self._reconcile(user_id, set(requested), config, result)
        except TasklinkError as exc:
            self._store.finish_sync_run(run.id, SyncRunStatus.ERROR, str(exc) or "Unknown sync error")
            raise
        except Exception as exc:
            self._store.finish_sync_run(run.id, SyncRunStatus.ERROR, str(exc) or "Unknown sync error")
            raise SyncError(f"Sync run {run.id} failed: {exc}") from exc

        self._store.finish_sync_run(
            run.id,
            SyncRunStatus.SUCCESS,
            f"Created {result.created} task(s), skipped {result.skipped}.",
        )
        return result

    async def _reconcile(
        self,
        user_id: str,
        course_ids: set[str],
        config: PriorityBucketConfig,
        result: SyncResult,
    ) -> None:
        courses = self._store.list(
            Course,
            lambda course: course.id in course_ids and bool(course.todoist_project_id),
            user_id=user_id,
        )
        if not courses:
            _LOG.info("No mapped courses in scope for user %s", user_id)
            return

        course_by_id = {course.id: course for course in courses}
        assignments = self._store.list(Assignment, lambda a: a.course_id in course_by_id)
        project_ids = sorted({course.todoist_project_id for course in courses if course.todoist_project_id})
        index = await self._build_index(project_ids)
        today = today_in(self._zone, self._clock())

        self._progress.phase_start("Sync", total=len(assignments))
        try:
            for assignment in assignments:
                course = course_by_id[assignment.course_id]
                outcome = await self._sync_assignment(assignment, course, index, today, config)
                result.record(outcome)
                self._progress.item_done("Sync")
            self._progress.phase_done("Sync")
        except BaseException as exc:
            self._progress.phase_error("Sync", exc)
            raise

    async def _build_index(self, project_ids: list[str]) -> TaskIndex:
        index = TaskIndex()
        self._progress.phase_start("Index", total=len(project_ids))
        try:
            for project_id in project_ids:
                try:
                    tasks = await self._destination.list_tasks(project_id)
                except AuthenticationError:
                    raise
                except ProviderError as exc:
                    _LOG.warning("Failed to load existing Todoist tasks for project %s: %s", project_id, exc)
                else:
                    for task in tasks:
                        index.add_listed(project_id, task.content, task.id)
                self._progress.item_done("Index")
            self._progress.phase_done("Index")
        except BaseException as exc:
            self._progress.phase_error("Index", exc)
            raise
        return index

    async def _sync_assignment(
        self,
        assignment: Assignment,
        course: Course,
        index: TaskIndex,
        today: date,
        config: PriorityBucketConfig,
    ) -> AssignmentOutcome:
        project_id = course.todoist_project_id
        if not project_id:
            return AssignmentOutcome.SKIPPED

        priority = priority_for(assignment.due_date, today, config)
        update = UpdateTaskInput(priority=priority, due_date=assignment.due_date)

        if assignment.todoist_task_id is None:
            existing_id = index.lookup(project_id, assignment.name)
            if existing_id is not None:
                if await self._try_update(existing_id, update, assignment):
                    self._store.update(
                        Assignment, assignment.id, todoist_task_id=existing_id, last_synced_at=self._clock()
                    )
                    return AssignmentOutcome.RELINKED
            return await self._create(assignment, project_id, priority, index)

        if await self._try_update(assignment.todoist_task_id, update, assignment):
            self._store.update(Assignment, assignment.id, last_synced_at=self._clock())
            return AssignmentOutcome.UPDATED

        # Presumed deleted remotely; the next run takes the unlinked path.
        self._store.update(Assignment, assignment.id, todoist_task_id=None, last_synced_at=self._clock())
        return AssignmentOutcome.UNLINKED

    async def _create(
        self,
        assignment: Assignment,
        project_id: str,
        priority: int,
        index: TaskIndex,
    ) -> AssignmentOutcome:
        create = CreateTaskInput(
            content=assignment.name,
            project_id=project_id,
            priority=priority,
            due_date=assignment.due_date,
        )
        try:
            task = await self._destination.create_task(create)
        except AuthenticationError:
            raise
        except ProviderError as exc:
            _LOG.warning("Creating Todoist task for assignment %s failed: %s", assignment.id, exc)
            return AssignmentOutcome.SKIPPED

        self._store.update(Assignment, assignment.id, todoist_task_id=task.id, last_synced_at=self._clock())
        index.add_created(project_id, assignment.name, task.id)
        return AssignmentOutcome.CREATED

    async def _try_update(self, task_id: str, update: UpdateTaskInput, assignment: Assignment) -> bool:
        try:
            await self._destination.update_task(task_id, update)
        except AuthenticationError:
            # A rejected token says nothing about the task; keep the link and fail the run.
            raise
        except ProviderError as exc:
            _LOG.warning("Updating Todoist task %s for assignment %s failed: %s", task_id, assignment.id, exc)
            return False
        return True
