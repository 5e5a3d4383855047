"""Command-line interface for Tasklink."""

from __future__ import annotations

import argparse
import asyncio as asyncio
import logging as logging
from collections.abc import Awaitable, Callable
from typing import Any

from tasklink import ConfigError as ConfigError
from tasklink import Tasklink as Tasklink
from tasklink import load_config as load_config
from tasklink.cli.app import main as main
from tasklink.cli.commands import browse as browse_command
from tasklink.cli.commands import connect as connect_command
from tasklink.cli.commands import fetch as fetch_command
from tasklink.cli.commands import sync as sync_command
from tasklink.cli.commands import watch as watch_command
from tasklink.cli.parser import build_parser as build_parser
from tasklink.scheduler import AutoSyncScheduler as AutoSyncScheduler

COMMANDS: dict[str, Callable[[argparse.Namespace], Awaitable[Any]]] = {
    "connect": connect_command.run_connect,
    "fetch": fetch_command.run_fetch,
    "status": browse_command.run_status,
    "courses": browse_command.run_courses,
    "projects": browse_command.run_projects,
    "map": browse_command.run_map,
    "assignments": browse_command.run_assignments,
    "sync": sync_command.run_sync,
    "runs": browse_command.run_runs,
    "watch": watch_command.run_watch,
}
