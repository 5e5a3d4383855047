"""Priority bucket configuration contracts."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

# Threshold sentinel meaning "5 or more days until due".
OPEN_ENDED_DAYS = 5


class Bucket(StrEnum):
    """Urgency buckets, most urgent first."""

    B1 = "b1"
    B2 = "b2"
    B3 = "b3"
    B4 = "b4"


BUCKET_ORDER: tuple[Bucket, ...] = (Bucket.B1, Bucket.B2, Bucket.B3, Bucket.B4)


def clamp_day(value: int) -> int:
    """Clamp a days-until-due value into ``[1, OPEN_ENDED_DAYS]``."""
    if value <= 1:
        return 1
    if value >= OPEN_ENDED_DAYS:
        return OPEN_ENDED_DAYS
    return value


class PriorityRange(BaseModel):
    enabled: bool = True
    to: int = OPEN_ENDED_DAYS
    priority: int = Field(default=1, ge=1, le=4)

    @field_validator("to")
    @classmethod
    def clamp_to(cls, value: int) -> int:
        return clamp_day(value)


class PriorityBucketConfig(BaseModel):
    """Four ordered urgency ranges and the Todoist priority each maps to.

    Validation keeps the first three thresholds non-decreasing by pushing a
    lower later threshold above its predecessor, and pins ``b4.to`` to the
    open-ended sentinel. ``enabled`` never affects thresholds.
    """

    b1: PriorityRange = Field(default_factory=lambda: PriorityRange(enabled=True, to=2, priority=4))
    b2: PriorityRange = Field(default_factory=lambda: PriorityRange(enabled=True, to=3, priority=3))
    b3: PriorityRange = Field(default_factory=lambda: PriorityRange(enabled=True, to=4, priority=2))
    b4: PriorityRange = Field(default_factory=lambda: PriorityRange(enabled=False, to=OPEN_ENDED_DAYS, priority=1))

    @model_validator(mode="after")
    def normalize_thresholds(self) -> PriorityBucketConfig:
        cut1 = self.b1.to
        cut2 = self.b2.to
        cut3 = self.b3.to
        if cut2 < cut1:
            cut2 = clamp_day(cut1 + 1)
        if cut3 < cut2:
            cut3 = clamp_day(cut2 + 1)

        self.b2 = self.b2.model_copy(update={"to": cut2})
        self.b3 = self.b3.model_copy(update={"to": cut3})
        self.b4 = self.b4.model_copy(update={"to": OPEN_ENDED_DAYS})
        return self

    def range_for(self, bucket: Bucket) -> PriorityRange:
        return getattr(self, bucket.value)

    def thresholds(self) -> tuple[int, int, int]:
        return self.b1.to, self.b2.to, self.b3.to
