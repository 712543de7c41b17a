"""Issue short-lived JWTs for delegated frontend authentication."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType
from typing import Any

import httpx

from .config import DEFAULT_TIMEOUT_SECONDS, DEFAULT_TOKEN_SCOPES, Credentials, HttpClientConfig
from .error_handler import classify_error
from .errors import VocaFuseError
from .http import build_async_client
from .models import ApiResponse, TokenGrant

logger = logging.getLogger(__name__)


class AccessToken:
    """Request JWTs scoped to a single end-user *identity*.

    Uses its own HTTP client with a fixed timeout and no retry policy, so it
    can be used without constructing a full :class:`~vocafuse.VocaFuseClient`.
    Keep API credentials on the server; hand only the issued token to browsers
    or mobile apps.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        identity: str,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Prepare a token issuer for *identity* using the given credentials."""
        if not identity:
            raise ValueError("identity must be a non-empty string")
        self._identity = identity
        credentials = Credentials(api_key=api_key, api_secret=api_secret)
        config = HttpClientConfig.model_validate(
            {"base_url": base_url, "timeout": DEFAULT_TIMEOUT_SECONDS}
        )
        self._client = build_async_client(credentials, config, transport=transport)

    @property
    def identity(self) -> str:
        """Return the end-user identity tokens are issued for."""
        return self._identity

    async def generate(
        self,
        *,
        expires_in: int | None = None,
        scopes: Sequence[str] | None = None,
    ) -> TokenGrant:
        """Request a new JWT for the configured identity.

        ``scopes`` defaults to the voicenote upload capability. Failures are
        raised as :class:`VocaFuseError` (typically authentication or
        validation kinds).
        """
        body: dict[str, Any] = {
            "user_id": self._identity,
            "scopes": list(scopes) if scopes else list(DEFAULT_TOKEN_SCOPES),
        }
        if expires_in is not None:
            body["expires_in"] = expires_in
        logger.debug("Requesting access token for identity %s", self._identity)
        try:
            response = await self._client.post("token", json=body)
            response.raise_for_status()
            return ApiResponse[TokenGrant].model_validate(response.json()).data
        except VocaFuseError:
            raise
        except Exception as exc:
            raise classify_error(exc) from exc

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AccessToken:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
