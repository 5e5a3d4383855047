"""Contracts shared across the engine, providers, and persistence layers."""

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
    Record,
    SyncRun,
    SyncRunStatus,
    SyncSchedule,
    TodoistAccount,
)
from tasklink.contracts.source import CourseListing, EnrollmentState, SourceAssignment, SourceClient, SourceCourse
from tasklink.contracts.status import AutoSyncStatus, CanvasStatus, StatusSummary, TodoistStatus
from tasklink.contracts.store import RecordStore
from tasklink.contracts.sync import AssignmentOutcome, FetchOptions, FetchResult, SyncResult

__all__ = [
    "Assignment",
    "AssignmentOutcome",
    "AuthenticationError",
    "AutoSyncStatus",
    "Bucket",
    "CanvasAccount",
    "CanvasStatus",
    "ConfigError",
    "Course",
    "CourseListing",
    "CreateTaskInput",
    "DestinationClient",
    "EnrollmentState",
    "FetchOptions",
    "FetchResult",
    "PriorityBucketConfig",
    "PriorityRange",
    "ProviderError",
    "Record",
    "RecordStore",
    "RemoteProject",
    "RemoteTask",
    "SourceAssignment",
    "SourceClient",
    "SourceCourse",
    "StatusSummary",
    "StoreError",
    "SyncError",
    "SyncResult",
    "SyncRun",
    "SyncRunStatus",
    "SyncSchedule",
    "TaskNotFoundError",
    "TasklinkConfig",
    "TasklinkError",
    "TodoistAccount",
    "TodoistStatus",
    "UpdateTaskInput",
]
