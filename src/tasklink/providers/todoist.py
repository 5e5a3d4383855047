"""Todoist REST v2 client."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

import httpx
from pydantic import ValidationError

from tasklink.contracts.config import DEFAULT_TODOIST_API_BASE
from tasklink.contracts.destination import (
    CreateTaskInput,
    DestinationClient,
    RemoteProject,
    RemoteTask,
    UpdateTaskInput,
)
from tasklink.contracts.exceptions import ProviderError, TaskNotFoundError
from tasklink.providers._http import HttpApiClient


class TodoistClient(HttpApiClient, DestinationClient):
    service = "Todoist"

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_TODOIST_API_BASE,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, token=token, max_retries=max_retries, transport=transport)

    async def __aenter__(self) -> TodoistClient:
        await super().__aenter__()
        return self

    async def list_projects(self) -> list[RemoteProject]:
        data = await self._json("GET", "/projects")
        projects: list[RemoteProject] = []
        for row in self._require_list(data, "/projects"):
            if not isinstance(row, dict):
                raise ProviderError("Todoist returned a malformed project entry")
            projects.append(RemoteProject(id=self._require_str(row, "id"), name=self._require_str(row, "name")))
        return projects

    async def list_tasks(self, project_id: str) -> list[RemoteTask]:
        data = await self._json("GET", "/tasks", params={"project_id": project_id})
        return [self._task_from_payload(row) for row in self._require_list(data, "/tasks")]

    async def create_task(self, input: CreateTaskInput) -> RemoteTask:
        # A missing due date is left off the payload entirely.
        body = input.model_dump(mode="json", exclude_none=True)
        # Retries resend the same id, which Todoist uses to drop duplicate creates.
        data = await self._json("POST", "/tasks", json=body, headers={"X-Request-Id": uuid4().hex})
        if not isinstance(data, dict):
            raise ProviderError("Todoist POST /tasks returned no task payload")
        return self._task_from_payload(data)

    async def update_task(self, task_id: str, input: UpdateTaskInput) -> None:
        # An explicitly set None due date goes out as null and clears it remotely.
        body = input.model_dump(mode="json", exclude_unset=True)
        await self._request("POST", f"/tasks/{task_id}", json=body)

    def _status_error(self, method: str, path: str, response: httpx.Response) -> ProviderError:
        if response.status_code == 404 and path.startswith("/tasks/"):
            task_id = path.removeprefix("/tasks/")
            return TaskNotFoundError(f"Todoist task {task_id} not found", task_id=task_id)
        return super()._status_error(method, path, response)

    def _task_from_payload(self, row: Any) -> RemoteTask:
        if not isinstance(row, dict):
            raise ProviderError("Todoist returned a malformed task entry")
        due = row.get("due")
        due_date = due.get("date") if isinstance(due, dict) else None
        priority = row.get("priority")
        try:
            return RemoteTask(
                id=self._require_str(row, "id"),
                content=self._require_str(row, "content"),
                project_id=self._require_str(row, "project_id"),
                priority=priority if isinstance(priority, int) else 1,
                # Timed dues carry a datetime; keep the calendar part.
                due_date=due_date[:10] if isinstance(due_date, str) else None,
            )
        except ValidationError as exc:
            raise ProviderError(f"Todoist returned a malformed task entry: {exc}") from exc

    @staticmethod
    def _require_list(data: Any, path: str) -> list[Any]:
        if not isinstance(data, list):
            raise ProviderError(f"Todoist GET {path} returned a non-list payload")
        return data

    @staticmethod
    def _require_str(data: dict[str, Any], key: str) -> str:
        value = data.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if not isinstance(value, str):
            raise ProviderError(f"Missing/invalid string at key '{key}'")
        return value
