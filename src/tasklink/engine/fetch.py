"""Canvas fetch-and-store cycle."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from tasklink.contracts.exceptions import ProviderError
from tasklink.contracts.records import Assignment, Course
from tasklink.contracts.source import CourseListing, EnrollmentState, SourceClient, SourceCourse
from tasklink.contracts.store import RecordStore
from tasklink.contracts.sync import FetchOptions, FetchResult
from tasklink.engine.dates import normalize_due_date, today_in
from tasklink.engine.progress import NullSyncProgress, SyncProgress
from tasklink.engine.window import is_in_scope

_LOG = logging.getLogger(__name__)


class FetchEngine:
    def __init__(
        self,
        source: SourceClient,
        store: RecordStore,
        *,
        zone: ZoneInfo,
        clock: Callable[[], datetime] | None = None,
        progress: SyncProgress | None = None,
    ) -> None:
        self._source = source
        self._store = store
        self._zone = zone
        self._clock = clock or (lambda: datetime.now(UTC))
        self._progress: SyncProgress = progress or NullSyncProgress()

    async def fetch(self, user_id: str, options: FetchOptions | None = None) -> FetchResult:
        options = options or FetchOptions()
        result = FetchResult()

        today = today_in(self._zone, self._clock())
        removed = self._purge_out_of_scope(user_id, today, options.include_undated)
        if removed:
            _LOG.info("Removed %d past-due or undated assignment(s) for user %s", removed, user_id)

        courses = await self._discover_courses(result)

        self._progress.phase_start("Assignments", total=len(courses))
        try:
            for source_course in courses:
                if not source_course.id or not source_course.name:
                    self._progress.item_done("Assignments")
                    continue
                course = self._store.upsert(
                    Course(user_id=user_id, canvas_course_id=source_course.id, name=source_course.name)
                )
                result.courses_processed += 1
                result.assignments_upserted += await self._fetch_course(course, options, today, result)
                self._progress.item_done("Assignments")
            self._progress.phase_done("Assignments")
        except BaseException as exc:
            self._progress.phase_error("Assignments", exc)
            raise

        return result

    async def _discover_courses(self, result: FetchResult) -> list[SourceCourse]:
        self._progress.phase_start("Courses")
        try:
            courses = list(await self._source.list_courses(EnrollmentState.ACTIVE))
            pending = await self._list_pending_courses()
            if not pending.ok:
                result.pending_courses_error = pending.error
            seen = {course.id for course in courses}
            for course in pending.courses:
                if course.id not in seen:
                    courses.append(course)
                    seen.add(course.id)
            self._progress.phase_done("Courses")
            return courses
        except BaseException as exc:
            self._progress.phase_error("Courses", exc)
            raise

    async def _list_pending_courses(self) -> CourseListing:
        try:
            courses = await self._source.list_courses(EnrollmentState.INVITED_OR_PENDING)
        except ProviderError as exc:
            _LOG.warning("Listing invited/pending courses failed; continuing with active courses only: %s", exc)
            return CourseListing(error=str(exc))
        return CourseListing(courses=courses)

    async def _fetch_course(self, course: Course, options: FetchOptions, today: date, result: FetchResult) -> int:
        try:
            assignments = await self._source.list_assignments(course.canvas_course_id)
        except ProviderError as exc:
            _LOG.error("Failed to fetch assignments for Canvas course %s: %s", course.canvas_course_id, exc)
            result.failed_courses.append(course.canvas_course_id)
            return 0

        upserted = 0
        for source_assignment in assignments:
            if not source_assignment.id or not source_assignment.name:
                continue
            due_date = normalize_due_date(source_assignment.due_at, self._zone)
            if not is_in_scope(due_date, today, options.look_ahead_days, options.include_undated):
                continue
            self._store.upsert(
                Assignment(
                    course_id=course.id,
                    canvas_assignment_id=source_assignment.id,
                    name=source_assignment.name,
                    description=source_assignment.description,
                    due_date=due_date,
                )
            )
            upserted += 1
        return upserted

    def _purge_out_of_scope(self, user_id: str, today: date, include_undated: bool) -> int:
        """Delete the user's stored assignments that are past due, or undated when those are excluded."""
        course_ids = {course.id for course in self._store.list(Course, user_id=user_id)}

        def out_of_scope(assignment: Assignment) -> bool:
            if assignment.course_id not in course_ids:
                return False
            if assignment.due_date is None:
                return not include_undated
            return assignment.due_date < today

        stale = self._store.list(Assignment, out_of_scope)
        for assignment in stale:
            self._store.delete(Assignment, assignment.id)
        return len(stale)
