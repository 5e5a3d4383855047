"""Retry and throttling support shared by the Canvas and Todoist clients."""

from __future__ import annotations

import asyncio
import logging
import random
import time

import httpx

_LOG = logging.getLogger(__name__)

_TRANSIENT_STATUS_CODES = frozenset({502, 503, 504})

# Canvas reports throttling as a 403 carrying this body text.
_CANVAS_THROTTLE_MARKER = b"Rate Limit Exceeded"

MAX_BACKOFF_SECONDS = 4.0
DEFAULT_THROTTLE_SECONDS = 1.0


def is_throttled(response: httpx.Response) -> bool:
    """True for Todoist's 429s and for Canvas's throttling 403s."""
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    if response.headers.get("X-Rate-Limit-Remaining", "").strip() in {"0", "0.0"}:
        return True
    return _CANVAS_THROTTLE_MARKER in response.content


def retry_after_seconds(response: httpx.Response) -> float:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return DEFAULT_THROTTLE_SECONDS
    try:
        return max(0.0, float(raw))
    except ValueError:
        return DEFAULT_THROTTLE_SECONDS


def backoff_seconds(attempt: int) -> float:
    """Exponential backoff for retry number *attempt* (zero-based), capped, plus jitter."""
    return min(MAX_BACKOFF_SECONDS, float(2**attempt)) + random.uniform(0.0, 0.25)


class RetryingTransport(httpx.AsyncBaseTransport):
    """Resends a request on transient failures, up to *max_retries* times.

    Connection errors and 502/503/504 are retried after an exponential
    backoff. A throttled response additionally holds back every request
    sent through this transport until the server's ``Retry-After`` has
    passed. When retries run out the last response is returned as is.

    Requests are resent unchanged, so a POST carrying an ``X-Request-Id``
    header is deduplicated server-side.
    """

    def __init__(
        self,
        *,
        service: str,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
    ) -> None:
        self._service = service
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._resume_at = 0.0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            await self._wait_until_resumed()
            retries_left = attempt < self._max_retries

            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as exc:
                if not retries_left:
                    raise
                _LOG.warning("%s %s %s failed (%s); retrying", self._service, request.method, request.url.path, exc)
                await self._sleep(backoff_seconds(attempt))
                attempt += 1
                continue

            if not retries_left:
                return response

            if response.status_code in {403, 429}:
                await response.aread()
            if is_throttled(response):
                await response.aclose()
                self._hold_back(retry_after_seconds(response))
            elif response.status_code in _TRANSIENT_STATUS_CODES:
                await response.aclose()
                _LOG.warning(
                    "%s %s %s returned HTTP %d; retrying",
                    self._service,
                    request.method,
                    request.url.path,
                    response.status_code,
                )
                await self._sleep(backoff_seconds(attempt))
            else:
                return response
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()

    def _hold_back(self, seconds: float) -> None:
        resume_at = time.monotonic() + seconds
        if resume_at > self._resume_at:
            _LOG.warning("%s is throttling requests; pausing for %.1fs", self._service, seconds)
            self._resume_at = resume_at

    async def _wait_until_resumed(self) -> None:
        remaining = self._resume_at - time.monotonic()
        if remaining > 0:
            await self._sleep(remaining)

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
