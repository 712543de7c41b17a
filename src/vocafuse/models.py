"""Pydantic schemas mirroring the VocaFuse API's JSON payloads."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class VoicenoteStatus(str, Enum):
    """Processing state of a voicenote."""

    PROCESSING = "processing"
    TRANSCRIBED = "transcribed"
    FAILED = "failed"


class WebhookEvent(str, Enum):
    """Event types a webhook can subscribe to."""

    VOICENOTE_CREATED = "voicenote.created"
    VOICENOTE_TRANSCRIBED = "voicenote.transcribed"
    VOICENOTE_FAILED = "voicenote.failed"
    VOICENOTE_DELETED = "voicenote.deleted"


class ResponseMeta(BaseModel):
    """Request metadata attached to API responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    request_id: str | None = Field(default=None, description="Server-assigned request identifier.")
    timestamp: str | None = Field(default=None, description="Server time of the response.")


class Pagination(BaseModel):
    """Pagination metadata returned with list responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    page: int = Field(description="Zero-based page index.")
    limit: int = Field(description="Maximum items per page.")
    total: int = Field(description="Total number of items across all pages.")
    has_more: bool = Field(description="Whether a further page exists.")


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope wrapping a payload in ``data``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    data: T
    meta: ResponseMeta | None = None


class PaginatedResponse(BaseModel, Generic[T]):
    """List envelope carrying one page of items plus pagination metadata."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    data: list[T]
    meta: ResponseMeta | None = None
    pagination: Pagination | None = None


class Voicenote(BaseModel):
    """A recorded voice note uploaded to VocaFuse.

    Statuses the client does not know yet are kept as plain strings.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    status: Annotated[VoicenoteStatus | str, Field(union_mode="left_to_right")]
    created_at: str
    updated_at: str
    duration: float | None = Field(default=None, description="Duration in seconds.")
    file_size: int | None = Field(default=None, description="File size in bytes.")
    metadata: dict[str, Any] | None = None


class TranscriptionWord(BaseModel):
    """Word-level timing and confidence within a transcription."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    word: str
    start_time: float
    end_time: float
    confidence: float


class Transcription(BaseModel):
    """Transcription produced for a voicenote."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    voicenote_id: str
    text: str
    confidence: float
    language: str
    words: list[TranscriptionWord] | None = None
    created_at: str


class Webhook(BaseModel):
    """A webhook endpoint registered for event notifications."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    url: str
    events: list[Annotated[WebhookEvent | str, Field(union_mode="left_to_right")]]
    secret: str | None = Field(default=None, repr=False)
    active: bool
    created_at: str
    updated_at: str


class APIKey(BaseModel):
    """An API key belonging to the account.

    ``api_secret`` is only populated in the response to key creation.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    name: str
    api_key: str
    api_secret: str | None = Field(default=None, repr=False)
    created_at: str
    last_used_at: str | None = None


class AccountSettings(BaseModel):
    """Account-level preferences."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    default_language: str | None = None
    webhook_url: str | None = None
    notifications_enabled: bool | None = None


class UsageStats(BaseModel):
    """Aggregate usage counters for the account."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    voicenotes_count: int
    total_duration: float
    api_calls_count: int


class Account(BaseModel):
    """The tenant account owning the API credentials."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    tenant_id: str
    name: str
    email: str
    plan: str
    created_at: str
    settings: AccountSettings | None = None
    usage: UsageStats | None = None


class TokenGrant(BaseModel):
    """Short-lived JWT issued for delegated frontend authentication."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    jwt_token: str = Field(repr=False)
    token_type: str
    expires_in: int = Field(description="Token lifetime in seconds.")
