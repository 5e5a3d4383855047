"""Configuration contracts."""

from __future__ import annotations

from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from tasklink.contracts.priority import PriorityBucketConfig
from tasklink.contracts.sync import FetchOptions

DEFAULT_INSTITUTION_TIMEZONE = "America/Los_Angeles"
DEFAULT_TODOIST_API_BASE = "https://api.todoist.com/rest/v2"

AUTH_MODES = frozenset({"env", "token"})


class TasklinkConfig(BaseModel):
    user_id: str = "default"
    store_path: Path = Path("tasklink-store.json")
    institution_timezone: str = DEFAULT_INSTITUTION_TIMEZONE
    canvas_base_url: str | None = None
    canvas_auth: str = "env"
    canvas_token: str | None = Field(default=None, repr=False)
    todoist_auth: str = "env"
    todoist_token: str | None = Field(default=None, repr=False)
    todoist_api_base: str = DEFAULT_TODOIST_API_BASE
    max_retries: int = Field(default=3, ge=0, le=10)
    auto_sync_minutes: int = Field(default=60, ge=1)
    fetch: FetchOptions = Field(default_factory=FetchOptions)
    priority: PriorityBucketConfig = Field(default_factory=PriorityBucketConfig)

    model_config = {"frozen": True}

    @field_validator("institution_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value}") from exc
        return value

    @model_validator(mode="after")
    def validate_auth_tokens(self) -> TasklinkConfig:
        for service in ("canvas", "todoist"):
            mode = getattr(self, f"{service}_auth")
            token = (getattr(self, f"{service}_token") or "").strip()
            if mode not in AUTH_MODES:
                raise ValueError(f"{service}_auth must be one of: env, token")
            if mode == "token" and not token:
                raise ValueError(f"{service} token auth requires a non-empty {service}_token")
            if mode != "token" and token:
                raise ValueError(f"{service}_token must be unset when {service}_auth is not 'token'")
        return self
