"""Environment token resolver."""

from __future__ import annotations

import os
from dataclasses import dataclass

from tasklink.auth.base import TokenResolver
from tasklink.contracts.exceptions import AuthenticationError


@dataclass(frozen=True)
class EnvTokenResolver(TokenResolver):
    env_var: str

    async def resolve(self) -> str:
        token = (os.getenv(self.env_var) or "").strip()
        if not token:
            raise AuthenticationError(f"{self.env_var} is not set or empty")
        return token
