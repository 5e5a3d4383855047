"""Auth module public exports."""

from tasklink.auth.base import TokenResolver
from tasklink.auth.factory import create_token_resolver
from tasklink.auth.resolvers import EnvTokenResolver, StaticTokenResolver

__all__ = ["EnvTokenResolver", "StaticTokenResolver", "TokenResolver", "create_token_resolver"]
