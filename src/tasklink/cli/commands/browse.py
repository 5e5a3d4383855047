"""Read-mostly commands: status, courses, projects, map, assignments, runs."""

from __future__ import annotations

import argparse

from tasklink import Assignment, Course, RemoteProject, StatusSummary, SyncRun
from tasklink.cli.common import format_due, format_or_none, format_timestamp


def format_status(status: StatusSummary) -> str:
    canvas = f"connected ({status.canvas.base_url})" if status.canvas.configured else "not connected"
    todoist = "connected" if status.todoist.configured else "not connected"
    if status.auto_sync.enabled:
        auto_sync = (
            f"every {status.auto_sync.interval_minutes} minute(s), "
            f"last run {format_timestamp(status.auto_sync.last_run_at)}"
        )
    else:
        auto_sync = "disabled"
    if status.last_sync_run is None:
        last_run = "none"
    else:
        run = status.last_sync_run
        last_run = f"{run.status.value} at {format_timestamp(run.started_at)}: {format_or_none(run.message)}"

    lines = [
        f"tasklink status for {status.user_id}",
        "",
        f"  Canvas:       {canvas}",
        f"  Todoist:      {todoist}",
        f"  Courses:      {status.courses_count} ({status.mapped_courses_count} mapped)",
        f"  Assignments:  {status.assignments_count}",
        f"  Auto-sync:    {auto_sync}",
        f"  Last sync:    {last_run}",
    ]
    return "\n".join(lines)


def format_courses(courses: list[Course]) -> str:
    if not courses:
        return "No courses stored yet. Run 'tasklink fetch' first."
    lines = [f"  {'ID':<32}  {'CANVAS':<10}  {'PROJECT':<12}  NAME"]
    for course in courses:
        lines.append(
            f"  {course.id:<32}  {course.canvas_course_id:<10}  "
            f"{format_or_none(course.todoist_project_id):<12}  {course.name}"
        )
    return "\n".join(lines)


def format_projects(projects: list[RemoteProject]) -> str:
    if not projects:
        return "No Todoist projects found."
    return "\n".join(f"  {project.id:<12}  {project.name}" for project in projects)


def format_assignments(assignments: list[Assignment], courses: dict[str, Course]) -> str:
    if not assignments:
        return "No assignments stored yet."
    lines: list[str] = []
    for assignment in assignments:
        course = courses.get(assignment.course_id)
        course_name = course.name if course is not None else assignment.course_id
        linked = "linked" if assignment.todoist_task_id else "unlinked"
        lines.append(f"  {format_due(assignment.due_date):<11}  {linked:<8}  {course_name}: {assignment.name}")
    return "\n".join(lines)


def format_runs(runs: list[SyncRun]) -> str:
    if not runs:
        return "No sync runs recorded."
    lines: list[str] = []
    for run in runs:
        lines.append(
            f"  {format_timestamp(run.started_at):<24}  {run.status.value:<7}  {format_or_none(run.message)}"
        )
    return "\n".join(lines)


async def run_status(args: argparse.Namespace) -> StatusSummary:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    status = cli.Tasklink.from_config(config).status(config.user_id)
    print(format_status(status))
    return status


async def run_courses(args: argparse.Namespace) -> list[Course]:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    courses = cli.Tasklink.from_config(config).list_courses(config.user_id)
    print(format_courses(courses))
    return courses


async def run_projects(args: argparse.Namespace) -> list[RemoteProject]:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    projects = await cli.Tasklink.from_config(config).list_projects(config.user_id)
    print(format_projects(projects))
    return projects


async def run_map(args: argparse.Namespace) -> Course:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    course = cli.Tasklink.from_config(config).map_course_project(
        config.user_id, args.course, None if args.clear else args.project
    )
    if course.todoist_project_id:
        print(f"Mapped course '{course.name}' to Todoist project {course.todoist_project_id}")
    else:
        print(f"Cleared Todoist project for course '{course.name}'")
    return course


async def run_assignments(args: argparse.Namespace) -> list[Assignment]:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    tasklink = cli.Tasklink.from_config(config)
    assignments = tasklink.list_assignments(config.user_id, limit=args.limit)
    courses = {course.id: course for course in tasklink.list_courses(config.user_id)}
    print(format_assignments(assignments, courses))
    return assignments


async def run_runs(args: argparse.Namespace) -> list[SyncRun]:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    runs = cli.Tasklink.from_config(config).list_sync_runs(config.user_id, limit=args.limit)
    print(format_runs(runs))
    return runs


__all__ = [
    "format_assignments",
    "format_courses",
    "format_projects",
    "format_runs",
    "format_status",
    "run_assignments",
    "run_courses",
    "run_map",
    "run_projects",
    "run_runs",
    "run_status",
]
