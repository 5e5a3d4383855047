"""Due-date driven priority classification."""

from __future__ import annotations

from datetime import date

from tasklink.contracts.priority import BUCKET_ORDER, Bucket, PriorityBucketConfig, clamp_day
from tasklink.engine.dates import days_until

# Todoist priority used when every bucket is disabled.
FALLBACK_PRIORITY = 2


def classify_bucket(due_date: date | None, today: date, config: PriorityBucketConfig) -> Bucket:
    """Classify an assignment into an urgency bucket.

    Undated work is least urgent; overdue work and work due today is always
    ``B1`` whatever the thresholds say. Enablement is not consulted here.
    """
    if due_date is None:
        return Bucket.B4

    diff_days = days_until(due_date, today)
    if diff_days <= 0:
        return Bucket.B1

    day = clamp_day(diff_days)
    cut1, cut2, cut3 = config.thresholds()
    if day <= cut1:
        return Bucket.B1
    if day <= cut2:
        return Bucket.B2
    if day <= cut3:
        return Bucket.B3
    return Bucket.B4


def resolve_priority(bucket: Bucket, config: PriorityBucketConfig) -> int:
    """Map *bucket* to a Todoist priority, borrowing from the nearest enabled bucket.

    More urgent neighbours are preferred over less urgent ones.
    """
    idx = BUCKET_ORDER.index(bucket)
    for candidate in reversed(BUCKET_ORDER[: idx + 1]):
        priority_range = config.range_for(candidate)
        if priority_range.enabled:
            return priority_range.priority
    for candidate in BUCKET_ORDER[idx + 1 :]:
        priority_range = config.range_for(candidate)
        if priority_range.enabled:
            return priority_range.priority
    return FALLBACK_PRIORITY


def priority_for(due_date: date | None, today: date, config: PriorityBucketConfig) -> int:
    return resolve_priority(classify_bucket(due_date, today, config), config)
