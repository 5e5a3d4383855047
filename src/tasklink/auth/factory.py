"""Token resolver factory."""

from __future__ import annotations

from tasklink.auth.base import TokenResolver
from tasklink.auth.resolvers.env import EnvTokenResolver
from tasklink.auth.resolvers.static import StaticTokenResolver
from tasklink.contracts.config import TasklinkConfig
from tasklink.contracts.exceptions import ConfigError

SERVICE_ENV_VARS: dict[str, str] = {
    "canvas": "CANVAS_TOKEN",
    "todoist": "TODOIST_TOKEN",
}


def create_token_resolver(service: str, config: TasklinkConfig) -> TokenResolver:
    if service not in SERVICE_ENV_VARS:
        raise ConfigError(f"Unknown service: {service}")

    auth_mode = getattr(config, f"{service}_auth")
    if auth_mode == "env":
        return EnvTokenResolver(env_var=SERVICE_ENV_VARS[service])
    if auth_mode == "token":
        return StaticTokenResolver(token=getattr(config, f"{service}_token") or "")
    raise ConfigError(f"Unknown auth mode: {auth_mode}")
