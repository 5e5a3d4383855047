"""Exception hierarchy for Tasklink."""

from __future__ import annotations


class TasklinkError(Exception):
    """Base exception for all Tasklink errors."""


class ConfigError(TasklinkError):
    """Configuration loading or validation failure, including missing accounts."""


class ProviderError(TasklinkError):
    """Base failure of a remote Canvas or Todoist operation."""


class AuthenticationError(ProviderError):
    """Authentication/authorization failure or missing credentials."""


class TaskNotFoundError(ProviderError):
    """The referenced Todoist task no longer exists."""

    def __init__(self, message: str, *, task_id: str) -> None:
        super().__init__(message)
        self.task_id = task_id


class StoreError(TasklinkError):
    """Record store access or integrity failure."""


class SyncError(TasklinkError):
    """Engine-level synchronization failure."""
