"""Configuration schemas and constants for the VocaFuse client."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from dotenv import dotenv_values
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    NonNegativeInt,
    PositiveFloat,
    field_validator,
)

VERSION: Final[str] = "0.1.0"

LIVE_API_URL: Final[str] = "https://api.vocafuse.com"
TEST_API_URL: Final[str] = "https://test-api.vocafuse.com"
LIVE_KEY_PREFIX: Final[str] = "sk_live_"
TEST_KEY_PREFIX: Final[str] = "sk_test_"

API_KEY_HEADER: Final[str] = "X-VocaFuse-API-Key"
API_SECRET_HEADER: Final[str] = "X-VocaFuse-API-Secret"  # noqa: S105
SIGNATURE_HEADER: Final[str] = "X-VocaFuse-Signature"
TIMESTAMP_HEADER: Final[str] = "X-VocaFuse-Timestamp"
DELIVERY_ID_HEADER: Final[str] = "X-VocaFuse-Delivery-ID"

DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0
DEFAULT_PAGE_LIMIT: Final[int] = 50
MAX_PAGE_LIMIT: Final[int] = 100
DEFAULT_TOKEN_SCOPES: Final[tuple[str, ...]] = ("voice-api.upload_voicenote",)
RETRYABLE_STATUS_CODES: Final[frozenset[int]] = frozenset({408, 429, 500, 502, 503, 504})

API_KEY_ENV: Final[str] = "VOCAFUSE_API_KEY"
API_SECRET_ENV: Final[str] = "VOCAFUSE_API_SECRET"  # noqa: S105
BASE_URL_ENV: Final[str] = "VOCAFUSE_BASE_URL"


def default_user_agent() -> str:
    """Return the User-Agent string identifying this library."""
    return f"VocaFuse-Python-SDK/{VERSION}"


class Credentials(BaseModel):
    """API key and secret pair used to authenticate every request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: str = Field(..., min_length=1, description="VocaFuse API key (sk_live_/sk_test_)")
    api_secret: str = Field(..., min_length=1, repr=False, description="VocaFuse API secret")


class RetryConfig(BaseModel):
    """Exponential backoff policy applied to every outbound API request.

    Retries are applied regardless of HTTP method. A retried ``POST`` may
    create a duplicate resource when the first attempt reached the server
    before failing; no idempotency key is sent.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_retries: NonNegativeInt = Field(
        default=3, description="Maximum number of retry attempts after the first request"
    )
    retry_delay_ms: NonNegativeInt = Field(
        default=1000,
        description="Base delay in milliseconds; attempt n waits retry_delay_ms * 2**n",
    )
    retryable_statuses: frozenset[int] = Field(
        default=RETRYABLE_STATUS_CODES,
        description="HTTP status codes treated as transient failures",
    )

    @field_validator("retryable_statuses")
    @classmethod
    def _check_status_codes(cls, value: frozenset[int]) -> frozenset[int]:
        """Reject values that cannot be HTTP status codes."""
        invalid = sorted(code for code in value if not 100 <= code <= 599)
        if invalid:
            raise ValueError(f"Invalid HTTP status codes in retryable_statuses: {invalid}")
        return value

    @classmethod
    def merged(cls, overrides: RetryConfig | Mapping[str, Any] | None = None) -> RetryConfig:
        """Return a policy with *overrides* applied on top of the defaults."""
        if overrides is None:
            return cls()
        if isinstance(overrides, RetryConfig):
            return overrides
        return cls.model_validate(dict(overrides))


class HttpClientConfig(BaseModel):
    """HTTP transport tuning parameters for VocaFuse requests."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: HttpUrl | None = Field(
        default=None,
        description="Root URL for API requests; derived from the API key prefix when omitted",
    )
    timeout: PositiveFloat = Field(
        default=DEFAULT_TIMEOUT_SECONDS, description="Per-request timeout in seconds"
    )
    user_agent: str = Field(
        default_factory=default_user_agent, description="User-Agent header for outbound requests"
    )
    max_connections: NonNegativeInt = Field(
        default=10, description="Maximum concurrent HTTP connections (0 => unlimited)"
    )
    enable_http2: bool = Field(
        default=False, description="Whether HTTP/2 should be attempted when available"
    )

    @classmethod
    def from_environment(cls, *, env: Mapping[str, str] | None = None) -> HttpClientConfig:
        """Build a configuration from environment variables with safe defaults.

        Recognised variables:
            - ``VOCAFUSE_BASE_URL`` → ``base_url``
        """
        source = dict(os.environ if env is None else env)
        base_url = source.get(BASE_URL_ENV)
        return cls(base_url=HttpUrl(base_url) if base_url else None)


def load_credentials_from_environment(
    *,
    env: Mapping[str, str] | None = None,
    dotenv_path: Path | str | None = None,
) -> Credentials:
    """Load VocaFuse credentials from the environment or a ``.env`` file.

    Values in the process environment take precedence over values parsed from
    *dotenv_path*. The file is only read, never loaded into ``os.environ``.

    Raises:
        ValueError: If the required keys cannot be resolved.

    """
    resolved: dict[str, str] = {}
    if dotenv_path is not None and Path(dotenv_path).is_file():
        for key, value in dotenv_values(dotenv_path).items():
            if value is not None:
                resolved[key] = value
    resolved.update(os.environ if env is None else env)

    api_key = resolved.get(API_KEY_ENV)
    api_secret = resolved.get(API_SECRET_ENV)
    if not api_key or not api_secret:
        missing = [key for key in (API_KEY_ENV, API_SECRET_ENV) if not resolved.get(key)]
        raise ValueError(f"Missing credential keys: {', '.join(missing)}")
    return Credentials(api_key=api_key, api_secret=api_secret)
