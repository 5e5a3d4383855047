"""Client factories keyed off stored per-user accounts."""

from __future__ import annotations

from tasklink.contracts.config import DEFAULT_TODOIST_API_BASE
from tasklink.contracts.destination import DestinationClient
from tasklink.contracts.records import CanvasAccount, TodoistAccount
from tasklink.contracts.source import SourceClient
from tasklink.providers.canvas import CanvasClient
from tasklink.providers.todoist import TodoistClient


def create_source_client(account: CanvasAccount, *, max_retries: int = 3) -> SourceClient:
    return CanvasClient(base_url=account.base_url, token=account.access_token, max_retries=max_retries)


def create_destination_client(
    account: TodoistAccount,
    *,
    base_url: str = DEFAULT_TODOIST_API_BASE,
    max_retries: int = 3,
) -> DestinationClient:
    return TodoistClient(token=account.access_token, base_url=base_url, max_retries=max_retries)
