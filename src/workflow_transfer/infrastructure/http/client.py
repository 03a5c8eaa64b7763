"""Retrying HTTP client with backoff and request statistics."""

from __future__ import annotations

import asyncio
import json as jsonlib
import logging
import random
import socket
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = frozenset({429})
_RETRYABLE_NETWORK_CODES = frozenset({"ECONNRESET", "ETIMEDOUT", "ENOTFOUND"})
_DEFAULT_SENSITIVE_HEADERS = ("x-n8n-api-key", "authorization", "x-api-key")


class HttpRequestError(RuntimeError):
    """Raised when an HTTP request fails after retries or without retry."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.response_body = response_body


@dataclass(slots=True, frozen=True)
class HttpClientStats:
    """Request counters snapshot."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    retried_requests: int = 0


class HttpClient:
    """Generic JSON request executor with timeout, retry and statistics."""

    def __init__(
        self,
        base_url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        retry_base_delay_seconds: float = 1.0,
        retry_max_jitter_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sensitive_headers: tuple[str, ...] = _DEFAULT_SENSITIVE_HEADERS,
    ) -> None:
        self._base_url = self._normalize_base_url(base_url)
        self._headers = dict(headers or {})
        self._timeout_seconds = max(timeout_seconds, 0.001)
        self._max_retries = max(max_retries, 1)
        self._retry_base_delay_seconds = max(retry_base_delay_seconds, 0.0)
        self._retry_max_jitter_seconds = max(retry_max_jitter_seconds, 0.0)
        self._transport = transport
        self._sensitive_headers = frozenset(name.lower() for name in sensitive_headers)

        self._total_requests = 0
        self._successful_requests = 0
        self._failed_requests = 0
        self._retried_requests = 0

    @property
    def base_url(self) -> str:
        """Return normalized base URL."""

        return self._base_url

    @property
    def stats(self) -> HttpClientStats:
        """Return a snapshot of request counters."""

        return HttpClientStats(
            total_requests=self._total_requests,
            successful_requests=self._successful_requests,
            failed_requests=self._failed_requests,
            retried_requests=self._retried_requests,
        )

    def reset_stats(self) -> None:
        """Reset request counters to zero."""

        self._total_requests = 0
        self._successful_requests = 0
        self._failed_requests = 0
        self._retried_requests = 0

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Execute one request and return the parsed body.

        JSON bodies are decoded, other non-empty bodies are returned as text and
        empty bodies as `None`. Responses with status 429 or 5xx and transient
        network failures are retried with exponential backoff plus jitter.
        """

        method = method.upper()
        url = self._endpoint(endpoint)
        request_headers = {**self._headers, **(headers or {})}
        request_timeout = timeout if timeout is not None else self._timeout_seconds
        self._total_requests += 1

        attempt = 0
        while True:
            logger.debug(
                "HTTP %s %s attempt=%d headers=%s",
                method,
                url,
                attempt + 1,
                self._masked_headers(request_headers),
            )
            cause: BaseException | None = None
            try:
                response = await self._send(
                    method,
                    url,
                    json=json,
                    headers=request_headers,
                    timeout=request_timeout,
                )
            except httpx.HTTPError as exc:
                code = _network_error_code(exc)
                error = HttpRequestError(
                    f"{method} {url} failed: {str(exc) or type(exc).__name__}",
                    code=code,
                )
                retryable = code in _RETRYABLE_NETWORK_CODES
                cause = exc
            else:
                body = self._parse_body(response)
                if response.is_success:
                    self._successful_requests += 1
                    return body
                error = HttpRequestError(
                    f"HTTP {response.status_code}: {_body_text(body)}",
                    status_code=response.status_code,
                    response_body=body,
                )
                retryable = _is_retryable_status(response.status_code)

            if not retryable or attempt + 1 >= self._max_retries:
                self._failed_requests += 1
                logger.warning(
                    "HTTP %s %s failed after %d attempt(s): %s",
                    method,
                    url,
                    attempt + 1,
                    error,
                )
                raise error from cause

            delay = self._retry_delay_seconds(attempt)
            self._retried_requests += 1
            logger.warning(
                "HTTP %s %s failed (attempt %d/%d), retrying in %.2fs: %s",
                method,
                url,
                attempt + 1,
                self._max_retries,
                delay,
                error,
            )
            await asyncio.sleep(delay)
            attempt += 1

    async def _send(
        self,
        method: str,
        url: str,
        *,
        json: Any,
        headers: dict[str, str],
        timeout: float,
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=timeout,
            transport=self._transport,
        ) as http_client:
            return await http_client.request(method, url, json=json, headers=headers)

    def _retry_delay_seconds(self, attempt: int) -> float:
        delay = self._retry_base_delay_seconds * (2**attempt)
        if self._retry_max_jitter_seconds > 0:
            delay += random.uniform(0, self._retry_max_jitter_seconds)
        return delay

    def _parse_body(self, response: httpx.Response) -> Any:
        text = response.text
        if not text.strip():
            return None
        try:
            return response.json()
        except ValueError:
            return text

    def _masked_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        return {
            name: mask_secret(value) if name.lower() in self._sensitive_headers else value
            for name, value in headers.items()
        }

    def _endpoint(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self._base_url}/{endpoint.lstrip('/')}"

    def _normalize_base_url(self, base_url: str) -> str:
        normalized = base_url.strip().rstrip("/")
        if not normalized:
            raise ValueError("HTTP client base URL must not be empty.")
        return normalized


def mask_secret(value: str) -> str:
    """Mask a secret, keeping only its last three characters."""

    if len(value) <= 3:
        return "***"
    return f"***{value[-3:]}"


def _is_retryable_status(status_code: int) -> bool:
    return status_code in _RETRYABLE_STATUS_CODES or 500 <= status_code <= 599


def _body_text(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    return jsonlib.dumps(body)


def _network_error_code(exc: httpx.HTTPError) -> str | None:
    """Map a transport failure to an errno-style code where one is known."""

    if isinstance(exc, httpx.TimeoutException):
        return "ETIMEDOUT"

    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return "ECONNREFUSED"
        if isinstance(current, ConnectionResetError):
            return "ECONNRESET"
        if isinstance(current, socket.gaierror):
            return "ENOTFOUND"
        if isinstance(current, TimeoutError):
            return "ETIMEDOUT"
        current = current.__cause__ or current.__context__

    message = str(exc).lower()
    if "name or service not known" in message or "nodename nor servname" in message:
        return "ENOTFOUND"
    if "connection refused" in message:
        return "ECONNREFUSED"
    if isinstance(exc, (httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError)):
        return "ECONNRESET"
    return None


__all__ = ["HttpClient", "HttpClientStats", "HttpRequestError", "mask_secret"]
