"""In-memory Todoist destination fake for tests."""

from __future__ import annotations

from tasklink.contracts.destination import (
    CreateTaskInput,
    DestinationClient,
    RemoteProject,
    RemoteTask,
    UpdateTaskInput,
)
from tasklink.contracts.exceptions import AuthenticationError, ProviderError, TaskNotFoundError


class FakeTodoist(DestinationClient):
    """In-memory Todoist with deterministic task ids and spy tracking."""

    def __init__(self) -> None:
        self.projects: dict[str, RemoteProject] = {}
        self.tasks: dict[str, RemoteTask] = {}
        self._next_number = 1

        self.failing_list_projects: set[str] = set()
        self.failing_create_titles: set[str] = set()
        self.failing_update_ids: set[str] = set()
        self.rejecting_writes = False

        self.list_calls: list[str] = []
        self.create_calls: list[CreateTaskInput] = []
        self.update_calls: list[tuple[str, UpdateTaskInput]] = []

    async def __aenter__(self) -> FakeTodoist:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[override]
        return None

    def add_project(self, project_id: str, name: str) -> RemoteProject:
        project = RemoteProject(id=project_id, name=name)
        self.projects[project_id] = project
        return project

    def add_task(self, project_id: str, content: str, *, task_id: str | None = None) -> RemoteTask:
        task = RemoteTask(id=task_id or self._new_id(), content=content, project_id=project_id)
        self.tasks[task.id] = task
        return task

    def delete_task(self, task_id: str) -> None:
        del self.tasks[task_id]

    def tasks_in(self, project_id: str) -> list[RemoteTask]:
        return [task for task in self.tasks.values() if task.project_id == project_id]

    async def list_projects(self) -> list[RemoteProject]:
        return list(self.projects.values())

    async def list_tasks(self, project_id: str) -> list[RemoteTask]:
        self.list_calls.append(project_id)
        if project_id in self.failing_list_projects:
            raise ProviderError(f"Todoist listing failed for project {project_id}")
        return self.tasks_in(project_id)

    async def create_task(self, input: CreateTaskInput) -> RemoteTask:
        self.create_calls.append(input)
        if self.rejecting_writes:
            raise AuthenticationError("Todoist rejected the API token")
        if input.content in self.failing_create_titles:
            raise ProviderError(f"Todoist refused to create {input.content!r}")
        task = RemoteTask(
            id=self._new_id(),
            content=input.content,
            project_id=input.project_id,
            priority=input.priority,
            due_date=input.due_date,
        )
        self.tasks[task.id] = task
        return task

    async def update_task(self, task_id: str, input: UpdateTaskInput) -> None:
        self.update_calls.append((task_id, input))
        if self.rejecting_writes:
            raise AuthenticationError("Todoist rejected the API token")
        if task_id in self.failing_update_ids:
            raise ProviderError(f"Todoist update failed for {task_id}")
        task = self.tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(f"Todoist task {task_id} not found", task_id=task_id)
        changes: dict[str, object] = {"priority": input.priority}
        if "due_date" in input.model_fields_set:
            changes["due_date"] = input.due_date
        self.tasks[task_id] = task.model_copy(update=changes)

    def _new_id(self) -> str:
        task_id = f"task-{self._next_number}"
        self._next_number += 1
        return task_id
