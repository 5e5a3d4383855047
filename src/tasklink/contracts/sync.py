"""Fetch and sync cycle contracts."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class FetchOptions(BaseModel):
    """Windowing options for the fetch-and-store cycle.

    ``look_ahead_days`` of ``None`` means an unbounded future horizon;
    non-positive values are treated the same way.
    """

    look_ahead_days: int | None = None
    include_undated: bool = True

    @field_validator("look_ahead_days")
    @classmethod
    def drop_non_positive(cls, value: int | None) -> int | None:
        if value is None or value <= 0:
            return None
        return value


class FetchResult(BaseModel):
    courses_processed: int = 0
    assignments_upserted: int = 0
    failed_courses: list[str] = Field(default_factory=list)
    pending_courses_error: str | None = None


class AssignmentOutcome(StrEnum):
    CREATED = "created"
    RELINKED = "relinked"
    UPDATED = "updated"
    UNLINKED = "unlinked"
    SKIPPED = "skipped"


# Outcomes reported to callers as "skipped" for creation purposes.
SKIPPED_OUTCOMES = frozenset({AssignmentOutcome.RELINKED, AssignmentOutcome.UNLINKED, AssignmentOutcome.SKIPPED})


class SyncResult(BaseModel):
    sync_run_id: str
    outcomes: dict[AssignmentOutcome, int] = Field(default_factory=dict)

    @property
    def created(self) -> int:
        return self.outcomes.get(AssignmentOutcome.CREATED, 0)

    @property
    def skipped(self) -> int:
        return sum(count for outcome, count in self.outcomes.items() if outcome in SKIPPED_OUTCOMES)

    @property
    def updated(self) -> int:
        return self.outcomes.get(AssignmentOutcome.UPDATED, 0)

    def record(self, outcome: AssignmentOutcome) -> None:
        self.outcomes[outcome] = self.outcomes.get(outcome, 0) + 1
