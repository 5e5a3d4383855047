"""Shared httpx plumbing for the Canvas and Todoist clients."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from tasklink.contracts.exceptions import AuthenticationError, ProviderError
from tasklink.providers._retrying_transport import RetryingTransport, is_throttled

_LOG = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = httpx.Timeout(30.0)


class HttpApiClient:
    """Bearer-token JSON API client opened with ``async with``."""

    service = "HTTP"

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Any:
        if not self._token.strip():
            raise AuthenticationError(f"{self.service} access token is empty")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._token}"},
            timeout=_DEFAULT_TIMEOUT,
            transport=RetryingTransport(
                service=self.service,
                transport=self._transport,
                max_retries=self._max_retries,
            ),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        if self._client is None:
            raise ProviderError(f"{self.service} client is not initialized. Use 'async with'.")

        _LOG.debug("%s %s %s", self.service, method, path)
        try:
            response = await self._client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.service} request {method} {path} failed: {exc}") from exc

        if is_throttled(response):
            raise ProviderError(f"{self.service} is rate limiting {method} {path}; retries exhausted")
        if response.status_code in {401, 403}:
            raise AuthenticationError(
                f"{self.service} rejected the access token ({response.status_code}) for {method} {path}"
            )
        if response.is_error:
            raise self._status_error(method, path, response)
        return response

    def _status_error(self, method: str, path: str, response: httpx.Response) -> ProviderError:
        return ProviderError(f"{self.service} {method} {path} returned HTTP {response.status_code}")

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._request(method, path, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(f"{self.service} {method} {path} returned invalid JSON") from exc
