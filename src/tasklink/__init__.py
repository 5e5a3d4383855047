"""Public API surface for Tasklink."""

__version__ = "0.1.0"

from tasklink.auth import create_token_resolver
from tasklink.contracts.config import TasklinkConfig
from tasklink.contracts.destination import (
    CreateTaskInput,
    DestinationClient,
    RemoteProject,
    RemoteTask,
    UpdateTaskInput,
)
from tasklink.contracts.exceptions import (
    AuthenticationError,
    ConfigError,
    ProviderError,
    StoreError,
    SyncError,
    TasklinkError,
    TaskNotFoundError,
)
from tasklink.contracts.priority import Bucket, PriorityBucketConfig, PriorityRange
from tasklink.contracts.records import (
    Assignment,
    CanvasAccount,
    Course,
    SyncRun,
    SyncRunStatus,
    SyncSchedule,
    TodoistAccount,
)
from tasklink.contracts.source import EnrollmentState, SourceAssignment, SourceClient, SourceCourse
from tasklink.contracts.status import StatusSummary
from tasklink.contracts.store import RecordStore
from tasklink.contracts.sync import AssignmentOutcome, FetchOptions, FetchResult, SyncResult
from tasklink.engine.progress import SyncProgress
from tasklink.persistence import JsonRecordStore, MemoryRecordStore
from tasklink.scheduler import AutoSyncScheduler
from tasklink.sdk import Tasklink, load_config

__all__ = [
    "Assignment",
    "AssignmentOutcome",
    "AuthenticationError",
    "AutoSyncScheduler",
    "Bucket",
    "CanvasAccount",
    "ConfigError",
    "Course",
    "CreateTaskInput",
    "DestinationClient",
    "EnrollmentState",
    "FetchOptions",
    "FetchResult",
    "JsonRecordStore",
    "MemoryRecordStore",
    "PriorityBucketConfig",
    "PriorityRange",
    "ProviderError",
    "RecordStore",
    "RemoteProject",
    "RemoteTask",
    "SourceAssignment",
    "SourceClient",
    "SourceCourse",
    "StatusSummary",
    "StoreError",
    "SyncError",
    "SyncProgress",
    "SyncResult",
    "SyncRun",
    "SyncRunStatus",
    "SyncSchedule",
    "TaskNotFoundError",
    "Tasklink",
    "TasklinkConfig",
    "TasklinkError",
    "TodoistAccount",
    "UpdateTaskInput",
    "__version__",
    "create_token_resolver",
    "load_config",
]
