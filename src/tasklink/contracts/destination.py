"""Todoist destination client contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from types import TracebackType

from pydantic import BaseModel, Field


class RemoteProject(BaseModel):
    id: str
    name: str


class RemoteTask(BaseModel):
    id: str
    content: str
    project_id: str
    priority: int = 1
    due_date: date | None = None


class CreateTaskInput(BaseModel):
    """Payload for a new task; a missing due date is omitted on the wire."""

    content: str
    project_id: str
    priority: int = Field(ge=1, le=4)
    due_date: date | None = None


class UpdateTaskInput(BaseModel):
    """Payload for a task update.

    ``due_date`` left unset is not sent; set to ``None`` it is sent as an
    explicit null, clearing the remote due date.
    """

    priority: int = Field(ge=1, le=4)
    due_date: date | None = None


class DestinationClient(ABC):
    @abstractmethod
    async def __aenter__(self) -> DestinationClient: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def list_projects(self) -> list[RemoteProject]: ...  # pragma: no cover

    @abstractmethod
    async def list_tasks(self, project_id: str) -> list[RemoteTask]: ...  # pragma: no cover

    @abstractmethod
    async def create_task(self, input: CreateTaskInput) -> RemoteTask: ...  # pragma: no cover

    @abstractmethod
    async def update_task(self, task_id: str, input: UpdateTaskInput) -> None: ...  # pragma: no cover
