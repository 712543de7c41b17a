"""Public async client facade for the VocaFuse API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx

from .account import AccountResource
from .api_keys import APIKeysResource
from .config import Credentials, HttpClientConfig, RetryConfig, load_credentials_from_environment
from .http import AsyncHttpClientProtocol, VocaFuseHttpClient
from .retry import SleepFunc
from .voicenotes import VoicenotesResource
from .webhooks import WebhooksResource

logger = logging.getLogger(__name__)


class VocaFuseClient:
    """Entry point for the VocaFuse REST API.

    The environment (live or test) is chosen from the API key prefix unless
    ``base_url`` is given. Every request is retried with exponential backoff on
    transient statuses and every failure surfaces as a
    :class:`~vocafuse.errors.VocaFuseError`.

    Example::

        async with VocaFuseClient(api_key, api_secret) as client:
            page = await client.voicenotes.list(limit=10)
            transcription = await client.voicenotes.item("vn_123").transcription.get()
            async for voicenote in client.voicenotes.iterate(status="transcribed"):
                print(voicenote.id)
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        retry: RetryConfig | Mapping[str, Any] | None = None,
        http_config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: AsyncHttpClientProtocol | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Create a client for the given credentials.

        ``retry`` may be a full :class:`RetryConfig` or a partial mapping such as
        ``{"max_retries": 5}`` merged over the defaults. ``transport`` and
        ``http_client`` exist for testing and custom networking.
        """
        self._credentials = Credentials(api_key=api_key, api_secret=api_secret)
        self._retry = RetryConfig.merged(retry)
        config = http_config or HttpClientConfig()
        overrides: dict[str, Any] = {}
        if base_url is not None:
            overrides["base_url"] = base_url
        if timeout is not None:
            overrides["timeout"] = timeout
        if overrides:
            config = HttpClientConfig.model_validate({**config.model_dump(), **overrides})
        self._http_config = config
        self._http_client: AsyncHttpClientProtocol = http_client or VocaFuseHttpClient(
            self._credentials, config, self._retry, transport=transport, sleep=sleep
        )

        self.voicenotes = VoicenotesResource(self._http_client)
        self.webhooks = WebhooksResource(self._http_client)
        self.api_keys = APIKeysResource(self._http_client)
        self.account = AccountResource(self._http_client)

    @classmethod
    def from_environment(
        cls,
        *,
        env: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> VocaFuseClient:
        """Create a client from ``VOCAFUSE_API_KEY``/``VOCAFUSE_API_SECRET``.

        ``VOCAFUSE_BASE_URL`` is honoured when set. Extra keyword arguments are
        passed to the constructor.
        """
        credentials = load_credentials_from_environment(env=env)
        kwargs.setdefault("http_config", HttpClientConfig.from_environment(env=env))
        return cls(credentials.api_key, credentials.api_secret, **kwargs)

    @property
    def retry_config(self) -> RetryConfig:
        """Return the immutable retry policy for this client."""
        return self._retry

    @property
    def http_config(self) -> HttpClientConfig:
        """Return the HTTP configuration for this client."""
        return self._http_config

    async def close(self) -> None:
        """Release HTTP connections held by the client."""
        await self._http_client.close()

    async def __aenter__(self) -> VocaFuseClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
