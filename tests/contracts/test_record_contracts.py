from __future__ import annotations

from tasklink.contracts.records import CanvasAccount, Course, SyncRun, SyncRunStatus
from tasklink.contracts.source import SourceAssignment, SourceCourse
from tasklink.contracts.sync import AssignmentOutcome, SyncResult


def test_canvas_account_strips_trailing_slash_and_hides_token() -> None:
    account = CanvasAccount(user_id="u", base_url=" https://canvas.test/ ", access_token="tok-123")
    assert account.base_url == "https://canvas.test"
    assert "tok-123" not in repr(account)


def test_unique_key_uses_declared_fields() -> None:
    course = Course(user_id="u", canvas_course_id="42", name="Algebra")
    assert course.unique_key() == ("u", "42")


def test_records_get_distinct_ids() -> None:
    assert Course(user_id="u", canvas_course_id="1", name="a").id != Course(
        user_id="u", canvas_course_id="1", name="a"
    ).id


def test_sync_run_defaults_to_running() -> None:
    run = SyncRun(user_id="u")
    assert run.status is SyncRunStatus.RUNNING
    assert not run.finished
    assert run.finished_at is None


def test_source_models_coerce_numeric_ids() -> None:
    assert SourceCourse.model_validate({"id": 101, "name": "Bio"}).id == "101"
    assignment = SourceAssignment.model_validate({"id": 7, "name": "Lab", "due_at": None, "points_possible": 10})
    assert assignment.id == "7"
    assert assignment.due_at is None


def test_source_models_tolerate_missing_fields() -> None:
    assert SourceCourse.model_validate({"id": 5}).name == ""


def test_sync_result_counters() -> None:
    result = SyncResult(sync_run_id="run")
    for outcome in (
        AssignmentOutcome.CREATED,
        AssignmentOutcome.CREATED,
        AssignmentOutcome.RELINKED,
        AssignmentOutcome.UNLINKED,
        AssignmentOutcome.SKIPPED,
        AssignmentOutcome.UPDATED,
    ):
        result.record(outcome)

    assert result.created == 2
    assert result.skipped == 3
    assert result.updated == 1
