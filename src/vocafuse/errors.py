"""Typed error taxonomy for the VocaFuse client library.

Every failure raised by the client is a :class:`VocaFuseError`. The concrete
failure is identified by :attr:`VocaFuseError.kind` rather than by subclass, so
callers catch one exception type and branch on the kind::

    try:
        await client.voicenotes.item("vn_123").get()
    except VocaFuseError as exc:
        if exc.kind is ErrorKind.VOICENOTE_NOT_FOUND:
            ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by the client."""

    GENERIC = "vocafuse_error"
    AUTHENTICATION = "authentication_error"
    AUTHORIZATION = "authorization_error"
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found_error"
    VOICENOTE_NOT_FOUND = "voicenote_not_found_error"
    WEBHOOK_NOT_FOUND = "webhook_not_found_error"
    TRANSCRIPTION_NOT_FOUND = "transcription_not_found_error"
    API_KEY_NOT_FOUND = "api_key_not_found_error"
    CONFLICT = "conflict_error"
    RATE_LIMIT = "rate_limit_error"
    SERVER = "server_error"


NOT_FOUND_KINDS: frozenset[ErrorKind] = frozenset(
    {
        ErrorKind.NOT_FOUND,
        ErrorKind.VOICENOTE_NOT_FOUND,
        ErrorKind.WEBHOOK_NOT_FOUND,
        ErrorKind.TRANSCRIPTION_NOT_FOUND,
        ErrorKind.API_KEY_NOT_FOUND,
    }
)

_DEFAULT_SUGGESTIONS: Mapping[ErrorKind, str] = MappingProxyType(
    {
        ErrorKind.AUTHENTICATION: "Verify your API key and secret are correct and not expired.",
        ErrorKind.AUTHORIZATION: (
            "Check that your API key has the required permissions for this operation."
        ),
        ErrorKind.VOICENOTE_NOT_FOUND: (
            "Verify the voicenote ID exists and belongs to your account."
        ),
        ErrorKind.WEBHOOK_NOT_FOUND: (
            "Verify the webhook ID exists. Use client.webhooks.list() to see available webhooks."
        ),
        ErrorKind.TRANSCRIPTION_NOT_FOUND: (
            "The voicenote may still be processing. "
            "Check voicenote.status before accessing transcription."
        ),
        ErrorKind.API_KEY_NOT_FOUND: (
            "Verify the API key ID exists. Use client.api_keys.list() to see available keys."
        ),
        ErrorKind.SERVER: (
            "This is a server-side issue. Please try again later or contact support "
            "if it persists."
        ),
    }
)

_RESOURCE_NOT_FOUND_KINDS: Mapping[str, ErrorKind] = MappingProxyType(
    {
        "voicenote": ErrorKind.VOICENOTE_NOT_FOUND,
        "webhook": ErrorKind.WEBHOOK_NOT_FOUND,
        "transcription": ErrorKind.TRANSCRIPTION_NOT_FOUND,
        "api_key": ErrorKind.API_KEY_NOT_FOUND,
    }
)


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Request context attached to an error to aid debugging."""

    resource_type: str | None = None
    resource_id: str | None = None
    endpoint: str | None = None
    suggestion: str | None = None

    def with_default_suggestion(self, suggestion: str | None) -> ErrorContext:
        """Return a copy carrying *suggestion* unless one is already set."""
        if self.suggestion or not suggestion:
            return self
        return replace(self, suggestion=suggestion)


def _rate_limit_suggestion(retry_after: int | None) -> str:
    if retry_after:
        return f"Rate limit exceeded. Retry after {retry_after} seconds."
    return "Rate limit exceeded. Please reduce request frequency."


class VocaFuseError(Exception):
    """Base exception for all VocaFuse client errors.

    Instances are built once by the error classifier (or by the kind-specific
    constructors below) and are not mutated afterwards.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.GENERIC,
        status_code: int | None = None,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        context: ErrorContext | None = None,
        retry_after: int | None = None,
    ) -> None:
        """Initialise the error with its machine-readable fields."""
        super().__init__(message)
        self._message = message
        self._kind = kind
        self._status_code = status_code
        self._error_code = error_code
        self._details: Mapping[str, Any] | None = (
            MappingProxyType(dict(details)) if details is not None else None
        )
        self._context = context or ErrorContext()
        self._retry_after = retry_after

    @property
    def message(self) -> str:
        """Return the error message reported by the API or transport."""
        return self._message

    @property
    def kind(self) -> ErrorKind:
        """Return the failure kind used for dispatch."""
        return self._kind

    @property
    def status_code(self) -> int | None:
        """Return the HTTP status code, if the failure carried one."""
        return self._status_code

    @property
    def error_code(self) -> str | None:
        """Return the service-defined error code, if any."""
        return self._error_code

    @property
    def details(self) -> Mapping[str, Any] | None:
        """Return service-supplied error details, if any."""
        return self._details

    @property
    def context(self) -> ErrorContext:
        """Return the request context attached to this error."""
        return self._context

    @property
    def retry_after(self) -> int | None:
        """Return the server-advised wait in seconds for rate-limit errors."""
        return self._retry_after

    @property
    def is_not_found(self) -> bool:
        """Return ``True`` for the generic and resource-specific not-found kinds."""
        return self._kind in NOT_FOUND_KINDS

    @property
    def friendly_message(self) -> str:
        """Return the message enriched with resource context and a suggestion."""
        msg = self._message
        if self._context.resource_id:
            msg += f" ({self._context.resource_type or 'resource'}: {self._context.resource_id})"
        if self._context.suggestion:
            msg += f". {self._context.suggestion}"
        return msg

    def to_dict(self) -> dict[str, Any]:
        """Return a plain structured record suitable for logging or telemetry."""
        record: dict[str, Any] = {
            "kind": self._kind.value,
            "message": self._message,
            "friendly_message": self.friendly_message,
            "status_code": self._status_code,
            "error_code": self._error_code,
            "details": dict(self._details) if self._details is not None else None,
            "context": asdict(self._context),
        }
        if self._kind is ErrorKind.RATE_LIMIT:
            record["retry_after"] = self._retry_after
        return record

    def __repr__(self) -> str:
        """Return a debugging representation including kind and status."""
        return (
            f"{type(self).__name__}(kind={self._kind.value!r}, "
            f"status_code={self._status_code!r}, message={self._message!r})"
        )

    @classmethod
    def _of_kind(
        cls,
        kind: ErrorKind,
        message: str,
        status_code: int | None,
        error_code: str | None,
        details: Mapping[str, Any] | None,
        context: ErrorContext | None,
        retry_after: int | None = None,
    ) -> VocaFuseError:
        suggestion = (
            _rate_limit_suggestion(retry_after)
            if kind is ErrorKind.RATE_LIMIT
            else _DEFAULT_SUGGESTIONS.get(kind)
        )
        resolved = (context or ErrorContext()).with_default_suggestion(suggestion)
        return cls(
            message,
            kind=kind,
            status_code=status_code,
            error_code=error_code,
            details=details,
            context=resolved,
            retry_after=retry_after,
        )

    @classmethod
    def authentication(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        context: ErrorContext | None = None,
    ) -> VocaFuseError:
        """Build a 401 error for invalid or missing credentials."""
        return cls._of_kind(ErrorKind.AUTHENTICATION, message, 401, error_code, details, context)

    @classmethod
    def authorization(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        context: ErrorContext | None = None,
    ) -> VocaFuseError:
        """Build a 403 error for keys lacking the required permissions."""
        return cls._of_kind(ErrorKind.AUTHORIZATION, message, 403, error_code, details, context)

    @classmethod
    def validation(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        context: ErrorContext | None = None,
    ) -> VocaFuseError:
        """Build a 400 error for rejected request parameters."""
        return cls._of_kind(ErrorKind.VALIDATION, message, 400, error_code, details, context)

    @classmethod
    def not_found(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        context: ErrorContext | None = None,
    ) -> VocaFuseError:
        """Build a generic 404 error for an unrecognised resource path."""
        return cls._of_kind(ErrorKind.NOT_FOUND, message, 404, error_code, details, context)

    @classmethod
    def resource_not_found(
        cls,
        resource_type: str,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        resource_id: str | None = None,
        endpoint: str | None = None,
    ) -> VocaFuseError:
        """Build the 404 error specific to *resource_type*.

        Unknown resource types fall back to the generic not-found kind.
        """
        kind = _RESOURCE_NOT_FOUND_KINDS.get(resource_type)
        if kind is None:
            return cls.not_found(message, error_code, details, ErrorContext(endpoint=endpoint))
        context = ErrorContext(
            resource_type=resource_type, resource_id=resource_id, endpoint=endpoint
        )
        return cls._of_kind(kind, message, 404, error_code, details, context)

    @classmethod
    def voicenote_not_found(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        voicenote_id: str | None = None,
    ) -> VocaFuseError:
        """Build a 404 error for a missing voicenote."""
        return cls.resource_not_found("voicenote", message, error_code, details, voicenote_id)

    @classmethod
    def webhook_not_found(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        webhook_id: str | None = None,
    ) -> VocaFuseError:
        """Build a 404 error for a missing webhook."""
        return cls.resource_not_found("webhook", message, error_code, details, webhook_id)

    @classmethod
    def transcription_not_found(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        voicenote_id: str | None = None,
    ) -> VocaFuseError:
        """Build a 404 error for a transcription that is missing or not ready."""
        return cls.resource_not_found("transcription", message, error_code, details, voicenote_id)

    @classmethod
    def api_key_not_found(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        api_key_id: str | None = None,
    ) -> VocaFuseError:
        """Build a 404 error for a missing API key."""
        return cls.resource_not_found("api_key", message, error_code, details, api_key_id)

    @classmethod
    def conflict(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        context: ErrorContext | None = None,
    ) -> VocaFuseError:
        """Build a 409 error for a resource conflict."""
        return cls._of_kind(ErrorKind.CONFLICT, message, 409, error_code, details, context)

    @classmethod
    def rate_limit(
        cls,
        message: str,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        context: ErrorContext | None = None,
        retry_after: int | None = None,
    ) -> VocaFuseError:
        """Build a 429 error, optionally carrying the advised wait in seconds."""
        return cls._of_kind(
            ErrorKind.RATE_LIMIT, message, 429, error_code, details, context, retry_after
        )

    @classmethod
    def server(
        cls,
        message: str,
        status_code: int,
        error_code: str | None = None,
        details: Mapping[str, Any] | None = None,
        context: ErrorContext | None = None,
    ) -> VocaFuseError:
        """Build a 5xx error for a server-side failure."""
        return cls._of_kind(ErrorKind.SERVER, message, status_code, error_code, details, context)
