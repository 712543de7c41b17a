"""Async HTTP client abstraction tailored for VocaFuse API interactions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Protocol

import httpx

from .config import (
    API_KEY_HEADER,
    API_SECRET_HEADER,
    Credentials,
    HttpClientConfig,
    RetryConfig,
)
from .environment import resolve_base_url
from .retry import SleepFunc, send_with_retry

logger = logging.getLogger(__name__)


class AsyncHttpClientProtocol(Protocol):
    """Protocol describing the async HTTP operations required by the resources."""

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:  # pragma: no cover - protocol signature
        """Send a request and return the successful HTTP response."""
        ...

    async def close(self) -> None:  # pragma: no cover - protocol signature
        """Release HTTP resources and close underlying connections."""
        ...


def build_default_headers(credentials: Credentials, user_agent: str) -> MutableMapping[str, str]:
    """Return the header set applied to every API request."""
    return {
        API_KEY_HEADER: credentials.api_key,
        API_SECRET_HEADER: credentials.api_secret,
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": user_agent,
    }


def build_async_client(
    credentials: Credentials,
    config: HttpClientConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` bound to the resolved API endpoint."""
    base_url = str(config.base_url) if config.base_url else resolve_base_url(credentials.api_key)
    limits = httpx.Limits(max_connections=config.max_connections or None)
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=config.timeout,
        http2=config.enable_http2,
        limits=limits,
        headers=build_default_headers(credentials, config.user_agent),
        transport=transport,
    )


class VocaFuseHttpClient(AsyncHttpClientProtocol):
    """httpx-based client that injects auth headers and retries transient failures."""

    def __init__(
        self,
        credentials: Credentials,
        config: HttpClientConfig | None = None,
        retry: RetryConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialise the HTTP client for *credentials* with optional *config* and *retry*."""
        self._config = config or HttpClientConfig()
        self._retry = retry or RetryConfig()
        self._sleep = sleep
        self._client = build_async_client(credentials, self._config, transport=transport)
        logger.debug("VocaFuse HTTP client targeting %s", self._client.base_url)

    @property
    def base_url(self) -> str:
        """Return the API root URL requests are sent to."""
        return str(self._client.base_url)

    @property
    def retry_config(self) -> RetryConfig:
        """Return the retry policy applied to every request."""
        return self._retry

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send a request through the retry policy and raise for error statuses."""
        logger.debug(
            "%s %s with params=%s", method, url, None if params is None else list(params.keys())
        )
        request = self._client.build_request(method, url, params=params, json=json)
        started = asyncio.get_running_loop().time()
        if self._sleep is None:
            response = await send_with_retry(self._client, request, self._retry)
        else:
            response = await send_with_retry(self._client, request, self._retry, sleep=self._sleep)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "%s %s returned status %s", method, request.url.path, exc.response.status_code
            )
            raise
        logger.debug(
            "%s %s completed in %.2f ms",
            method,
            request.url.path,
            (asyncio.get_running_loop().time() - started) * 1000.0,
        )
        return response

    async def close(self) -> None:
        """Close the underlying httpx.AsyncClient instance."""
        await self._client.aclose()
        logger.debug("httpx.AsyncClient closed for base URL %s", self._client.base_url)
