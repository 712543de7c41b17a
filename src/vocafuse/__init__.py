"""Async Python client for the VocaFuse voice transcription API."""

from __future__ import annotations

from .access_token import AccessToken
from .account import AccountResource
from .api_keys import APIKeyHandle, APIKeysResource
from .client import VocaFuseClient
from .config import (
    DELIVERY_ID_HEADER,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    VERSION,
    Credentials,
    HttpClientConfig,
    RetryConfig,
    load_credentials_from_environment,
)
from .environment import is_live_key, is_test_key, resolve_base_url
from .error_handler import classify_error
from .errors import ErrorContext, ErrorKind, VocaFuseError
from .models import (
    Account,
    AccountSettings,
    APIKey,
    ApiResponse,
    PaginatedResponse,
    Pagination,
    ResponseMeta,
    TokenGrant,
    Transcription,
    TranscriptionWord,
    UsageStats,
    Voicenote,
    VoicenoteStatus,
    Webhook,
    WebhookEvent,
)
from .voicenotes import TranscriptionResource, VoicenoteHandle, VoicenotesResource
from .webhook_validator import RequestValidator
from .webhooks import WebhookHandle, WebhooksResource

__version__ = VERSION

__all__ = [
    "APIKey",
    "APIKeyHandle",
    "APIKeysResource",
    "AccessToken",
    "Account",
    "AccountResource",
    "AccountSettings",
    "ApiResponse",
    "Credentials",
    "DELIVERY_ID_HEADER",
    "ErrorContext",
    "ErrorKind",
    "HttpClientConfig",
    "PaginatedResponse",
    "Pagination",
    "RequestValidator",
    "ResponseMeta",
    "RetryConfig",
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    "TokenGrant",
    "Transcription",
    "TranscriptionResource",
    "TranscriptionWord",
    "UsageStats",
    "VocaFuseClient",
    "VocaFuseError",
    "Voicenote",
    "VoicenoteHandle",
    "VoicenoteStatus",
    "VoicenotesResource",
    "Webhook",
    "WebhookEvent",
    "WebhookHandle",
    "WebhooksResource",
    "__version__",
    "classify_error",
    "is_live_key",
    "is_test_key",
    "load_credentials_from_environment",
    "resolve_base_url",
]
