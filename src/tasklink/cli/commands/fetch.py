"""Fetch command formatting."""

from __future__ import annotations

import argparse

from tasklink import FetchOptions, FetchResult, TasklinkConfig
from tasklink.cli.common import format_or_none
from tasklink.cli.progress.rich import RichSyncProgress


def build_fetch_options(args: argparse.Namespace, config: TasklinkConfig) -> FetchOptions:
    look_ahead = args.days_ahead if args.days_ahead is not None else config.fetch.look_ahead_days
    return FetchOptions(
        look_ahead_days=look_ahead,
        include_undated=config.fetch.include_undated and not args.skip_undated,
    )


def format_fetch_summary(result: FetchResult, options: FetchOptions) -> str:
    window = f"{options.look_ahead_days} day(s)" if options.look_ahead_days is not None else "unbounded"
    lines = [
        "",
        "tasklink - fetch complete",
        "",
        f"  Courses:      {result.courses_processed}",
        f"  Assignments:  {result.assignments_upserted}",
        f"  Window:       {window}, undated {'included' if options.include_undated else 'excluded'}",
    ]
    if result.failed_courses:
        lines.append(f"  Failed:       {', '.join(result.failed_courses)}")
    if result.pending_courses_error is not None:
        lines.append(f"  Pending:      {format_or_none(result.pending_courses_error)}")
    lines.append("")
    return "\n".join(lines)


async def run_fetch(args: argparse.Namespace) -> FetchResult:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    options = build_fetch_options(args, config)

    if not args.verbose:
        with RichSyncProgress() as progress:
            tasklink = cli.Tasklink.from_config(config, progress=progress)
            result = await tasklink.run_fetch_cycle(config.user_id, options)
    else:
        tasklink = cli.Tasklink.from_config(config)
        result = await tasklink.run_fetch_cycle(config.user_id, options)

    print(format_fetch_summary(result, options))
    return result


__all__ = ["build_fetch_options", "format_fetch_summary", "run_fetch"]
