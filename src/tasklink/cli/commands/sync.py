"""Sync command formatting."""

from __future__ import annotations

import argparse

from tasklink import AssignmentOutcome, SyncResult, Tasklink
from tasklink.cli.progress.rich import RichSyncProgress


def format_sync_summary(result: SyncResult) -> str:
    lines = [
        "",
        "tasklink - sync complete",
        "",
        f"  Sync run:  {result.sync_run_id}",
        f"  Created:   {result.created}",
        f"  Updated:   {result.updated}",
        f"  Skipped:   {result.skipped}",
    ]
    relinked = result.outcomes.get(AssignmentOutcome.RELINKED, 0)
    unlinked = result.outcomes.get(AssignmentOutcome.UNLINKED, 0)
    if relinked or unlinked:
        lines.append(f"             ({relinked} relinked, {unlinked} unlinked for re-creation)")
    if result.created == 0 and result.skipped == 0 and result.updated == 0:
        lines.append("  Status:    nothing to sync")
    lines.append("")
    return "\n".join(lines)


async def run_sync(args: argparse.Namespace) -> SyncResult:
    import tasklink.cli as cli

    config = cli.load_config(args.config)

    if not args.verbose:
        with RichSyncProgress() as progress:
            tasklink = cli.Tasklink.from_config(config, progress=progress)
            result = await tasklink.run_sync_cycle(config.user_id, _course_ids(tasklink, config.user_id, args))
    else:
        tasklink = cli.Tasklink.from_config(config)
        result = await tasklink.run_sync_cycle(config.user_id, _course_ids(tasklink, config.user_id, args))

    print(format_sync_summary(result))
    return result


def _course_ids(tasklink: Tasklink, user_id: str, args: argparse.Namespace) -> list[str] | None:
    if not args.course:
        return None
    return [tasklink.find_course(user_id, ref).id for ref in args.course]


__all__ = ["format_sync_summary", "run_sync"]
