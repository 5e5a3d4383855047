"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

DEFAULT_CONFIG_PATH = "./tasklink.json"


def _package_version() -> str:
    try:
        return version("tasklink")
    except PackageNotFoundError:
        return "0.0.0"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to tasklink.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasklink")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    connect_parser = subparsers.add_parser("connect", help="Store Canvas or Todoist credentials")
    connect_subparsers = connect_parser.add_subparsers(dest="service", required=True)
    canvas_parser = connect_subparsers.add_parser("canvas", help="Connect a Canvas account")
    canvas_parser.add_argument("--base-url", default=None, help="Canvas base URL (default: canvas_base_url)")
    canvas_parser.add_argument("--token", default=None, help="Access token (default: resolved from config)")
    _add_common(canvas_parser)
    todoist_parser = connect_subparsers.add_parser("todoist", help="Connect a Todoist account")
    todoist_parser.add_argument("--token", default=None, help="API token (default: resolved from config)")
    _add_common(todoist_parser)

    fetch_parser = subparsers.add_parser("fetch", help="Fetch courses and assignments from Canvas")
    fetch_parser.add_argument(
        "--days-ahead",
        type=int,
        default=None,
        help="Only keep assignments due within N days (0 or less: no limit)",
    )
    fetch_parser.add_argument("--skip-undated", action="store_true", help="Drop assignments without a due date")
    _add_common(fetch_parser)

    status_parser = subparsers.add_parser("status", help="Show connections, stored counts and auto-sync state")
    _add_common(status_parser)

    courses_parser = subparsers.add_parser("courses", help="List stored courses and their project links")
    _add_common(courses_parser)

    projects_parser = subparsers.add_parser("projects", help="List Todoist projects")
    _add_common(projects_parser)

    map_parser = subparsers.add_parser("map", help="Link a course to a Todoist project")
    map_parser.add_argument("--course", required=True, help="Course id or Canvas course id")
    target = map_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--project", default=None, help="Todoist project id")
    target.add_argument("--clear", action="store_true", help="Remove the project link")
    _add_common(map_parser)

    assignments_parser = subparsers.add_parser("assignments", help="List stored assignments")
    assignments_parser.add_argument("--limit", type=int, default=200, help="Maximum rows to show (default: 200)")
    _add_common(assignments_parser)

    sync_parser = subparsers.add_parser("sync", help="Sync assignments of mapped courses to Todoist")
    sync_parser.add_argument(
        "--course",
        action="append",
        default=None,
        help="Course id or Canvas course id to sync (repeatable; default: all mapped courses)",
    )
    _add_common(sync_parser)

    runs_parser = subparsers.add_parser("runs", help="Show recent sync runs")
    runs_parser.add_argument("--limit", type=int, default=20, help="Maximum rows to show (default: 20)")
    _add_common(runs_parser)

    watch_parser = subparsers.add_parser("watch", help="Fetch and sync on a fixed interval")
    watch_parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Minutes between cycles (default: auto_sync_minutes)",
    )
    watch_parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    _add_common(watch_parser)

    return parser


__all__ = ["build_parser"]
