"""Engine module exports."""

from tasklink.engine.dates import normalize_due_date, resolve_timezone, today_in
from tasklink.engine.fetch import FetchEngine
from tasklink.engine.priority import FALLBACK_PRIORITY, classify_bucket, priority_for, resolve_priority
from tasklink.engine.progress import LoggingSyncProgress, NullSyncProgress, SyncProgress
from tasklink.engine.reconcile import SyncEngine, TaskIndex
from tasklink.engine.window import is_in_scope

__all__ = [
    "FALLBACK_PRIORITY",
    "FetchEngine",
    "LoggingSyncProgress",
    "NullSyncProgress",
    "SyncEngine",
    "SyncProgress",
    "TaskIndex",
    "classify_bucket",
    "is_in_scope",
    "normalize_due_date",
    "priority_for",
    "resolve_priority",
    "resolve_timezone",
    "today_in",
]
