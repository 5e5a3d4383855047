"""Static token resolver."""

from __future__ import annotations

from dataclasses import dataclass, field

from tasklink.auth.base import TokenResolver
from tasklink.contracts.exceptions import AuthenticationError


@dataclass(frozen=True)
class StaticTokenResolver(TokenResolver):
    token: str = field(repr=False)

    async def resolve(self) -> str:
        token = self.token.strip()
        if not token:
            raise AuthenticationError("Static token is empty")
        return token
