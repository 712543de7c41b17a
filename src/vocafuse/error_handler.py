"""Translate transport failures into :class:`~vocafuse.errors.VocaFuseError` instances."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, cast

import httpx

from .errors import ErrorContext, VocaFuseError

logger = logging.getLogger(__name__)

_FALLBACK_MESSAGE = "An error occurred"

# Ordered most specific first; the first match wins.
_RESOURCE_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("transcription", re.compile(r"(?:^|/)transcription(?:/|$)")),
    ("voicenote", re.compile(r"(?:^|/)voicenotes(?:/|$)")),
    ("webhook", re.compile(r"(?:^|/)webhooks(?:/|$)")),
    ("api_key", re.compile(r"(?:^|/)api-keys(?:/|$)")),
)

_RESOURCE_ID_PATTERNS: Mapping[str, re.Pattern[str]] = {
    "transcription": re.compile(r"(?:^|/)voicenotes/([^/]+)/transcription(?:/|$)"),
    "voicenote": re.compile(r"(?:^|/)voicenotes/([^/]+)(?:/|$)"),
    "webhook": re.compile(r"(?:^|/)webhooks/([^/]+)(?:/|$)"),
    "api_key": re.compile(r"(?:^|/)api-keys/([^/]+)(?:/|$)"),
}

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


def detect_resource_type(path: str | None) -> str | None:
    """Infer the resource type addressed by *path*.

    Works for absolute (``/voicenotes/vn_1``) and relative (``voicenotes/vn_1``)
    paths. Returns ``None`` when no known collection appears in the path.
    """
    if not path:
        return None
    for resource_type, pattern in _RESOURCE_RULES:
        if pattern.search(path):
            return resource_type
    return None


def extract_resource_id(path: str | None, resource_type: str) -> str | None:
    """Return the path segment following the collection named by *resource_type*.

    Transcriptions are addressed through their voicenote, so the voicenote id is
    returned for ``voicenotes/<id>/transcription``.
    """
    if not path:
        return None
    pattern = _RESOURCE_ID_PATTERNS.get(resource_type)
    if pattern is None:
        return None
    match = pattern.search(path)
    return match.group(1) if match else None


def parse_retry_after(value: str | None) -> int | None:
    """Parse a ``Retry-After`` header expressed in whole seconds."""
    if not value:
        return None
    match = _LEADING_DIGITS.match(value)
    if match is None:
        return None
    return int(match.group(1))


def classify_error(error: BaseException) -> VocaFuseError:
    """Convert *error* into the most specific :class:`VocaFuseError` available.

    Never raises. Already-typed errors are returned unchanged, local exceptions
    become the generic kind, and HTTP status failures are dispatched on their
    status code with resource context inferred from the request path.
    """
    if isinstance(error, VocaFuseError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        return _classify_status_error(error)

    if isinstance(error, httpx.RequestError):
        endpoint = _request_path(error)
        logger.debug("Transport failure for %s: %s", endpoint, error)
        return VocaFuseError(
            str(error) or type(error).__name__,
            context=ErrorContext(endpoint=endpoint),
        )

    return VocaFuseError(str(error) or "Unknown error occurred")


def _classify_status_error(error: httpx.HTTPStatusError) -> VocaFuseError:
    response = error.response
    status_code = response.status_code
    error_body = _error_body(response)

    message = _as_optional_str(error_body.get("message")) or str(error) or _FALLBACK_MESSAGE
    error_code = _as_optional_str(error_body.get("code"))
    raw_details = error_body.get("details")
    details = cast(Mapping[str, Any], raw_details) if isinstance(raw_details, Mapping) else None
    endpoint = error.request.url.path

    resource_type = detect_resource_type(endpoint)
    resource_id = extract_resource_id(endpoint, resource_type) if resource_type else None
    context = ErrorContext(endpoint=endpoint)

    if status_code == 401:
        return VocaFuseError.authentication(message, error_code, details, context)
    if status_code == 403:
        return VocaFuseError.authorization(message, error_code, details, context)
    if status_code == 400:
        return VocaFuseError.validation(message, error_code, details, context)
    if status_code == 404:
        if resource_type is not None:
            return VocaFuseError.resource_not_found(
                resource_type, message, error_code, details, resource_id, endpoint
            )
        return VocaFuseError.not_found(message, error_code, details, context)
    if status_code == 409:
        return VocaFuseError.conflict(message, error_code, details, context)
    if status_code == 429:
        retry_after = parse_retry_after(response.headers.get("retry-after"))
        return VocaFuseError.rate_limit(message, error_code, details, context, retry_after)
    if status_code >= 500:
        return VocaFuseError.server(message, status_code, error_code, details, context)
    return VocaFuseError(
        message,
        status_code=status_code,
        error_code=error_code,
        details=details,
        context=context,
    )


def _error_body(response: httpx.Response) -> Mapping[str, Any]:
    """Return the ``error`` object from an error envelope, or an empty mapping."""
    try:
        payload = response.json()
    except ValueError:
        return {}
    if not isinstance(payload, Mapping):
        return {}
    error = cast(Mapping[str, Any], payload).get("error")
    if not isinstance(error, Mapping):
        return {}
    return cast(Mapping[str, Any], error)


def _request_path(error: httpx.RequestError) -> str | None:
    try:
        return error.request.url.path
    except RuntimeError:
        # httpx raises when the error was constructed without a request.
        return None


def _as_optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
