"""Connect command."""

from __future__ import annotations

import argparse

from tasklink import CanvasAccount, TodoistAccount


async def run_connect(args: argparse.Namespace) -> CanvasAccount | TodoistAccount:
    import tasklink.cli as cli

    config = cli.load_config(args.config)
    tasklink = cli.Tasklink.from_config(config)

    account: CanvasAccount | TodoistAccount
    if args.service == "canvas":
        account = await tasklink.connect_canvas(config.user_id, base_url=args.base_url, token=args.token)
        print(f"Connected Canvas account for user {config.user_id} ({account.base_url})")
    else:
        account = await tasklink.connect_todoist(config.user_id, token=args.token)
        print(f"Connected Todoist account for user {config.user_id}")
    return account


__all__ = ["run_connect"]
