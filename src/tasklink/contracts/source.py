"""Canvas source client contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from types import TracebackType
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field


class EnrollmentState(StrEnum):
    ACTIVE = "active"
    INVITED_OR_PENDING = "invited_or_pending"


def _id_to_str(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# Canvas returns numeric ids; they are kept as strings.
SourceId = Annotated[str, BeforeValidator(_id_to_str)]


class SourceCourse(BaseModel):
    id: SourceId = ""
    name: str = ""


class SourceAssignment(BaseModel):
    id: SourceId = ""
    name: str = ""
    description: str | None = None
    due_at: str | None = None


class CourseListing(BaseModel):
    """Outcome of a best-effort course listing."""

    courses: list[SourceCourse] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SourceClient(ABC):
    @abstractmethod
    async def __aenter__(self) -> SourceClient: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def list_courses(self, state: EnrollmentState) -> list[SourceCourse]: ...  # pragma: no cover

    @abstractmethod
    async def list_assignments(self, course_id: str) -> list[SourceAssignment]: ...  # pragma: no cover
