"""Watch command: run the auto-sync scheduler in the foreground."""

from __future__ import annotations

import argparse

from tasklink import SyncResult

POLL_SECONDS = 30.0


async def run_watch(args: argparse.Namespace) -> SyncResult | None:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    scheduler = cli.AutoSyncScheduler(cli.Tasklink.from_config(config))
    schedule = scheduler.configure(
        config.user_id,
        enabled=True,
        interval_minutes=args.interval or config.auto_sync_minutes,
        fetch_options=config.fetch,
        priority_settings=config.priority,
    )

    if args.once:
        result = await scheduler.run_user(config.user_id)
        if result is None:
            print("Auto-sync cycle did not complete; see log output.")
        else:
            print(f"Created {result.created} task(s), skipped {result.skipped}.")
        return result

    print(f"Watching for user {config.user_id} every {schedule.interval_minutes} minute(s); Ctrl-C to stop.")
    await scheduler.run_forever(POLL_SECONDS)
    return None  # pragma: no cover


__all__ = ["run_watch"]
