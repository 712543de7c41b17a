"""Offline verification of VocaFuse webhook signatures."""

from __future__ import annotations

import hashlib
import hmac
import re

SIGNATURE_PREFIX = "sha256="
_HEX_DIGEST = re.compile(r"[0-9a-fA-F]{64}")

Payload = str | bytes


def _to_bytes(value: Payload) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def build_string_to_sign(
    payload: Payload, timestamp: str | None = None, delivery_id: str | None = None
) -> bytes:
    """Return the canonical bytes covered by a webhook signature.

    ``"{timestamp}.{delivery_id}.{payload}"`` when both are given,
    ``"{timestamp}.{payload}"`` with only a timestamp, otherwise the payload.
    Empty strings count as absent.
    """
    body = _to_bytes(payload)
    if timestamp and delivery_id:
        return f"{timestamp}.{delivery_id}.".encode() + body
    if timestamp:
        return f"{timestamp}.".encode() + body
    return body


class RequestValidator:
    """Validate that webhook deliveries were signed with the shared secret.

    Pass the raw request body exactly as received; re-serialised JSON will not
    match. The secret is held in memory only.
    """

    def __init__(self, secret: str) -> None:
        """Create a validator for the webhook signing *secret*."""
        self._key = secret.encode("utf-8")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(secret=<redacted>)"

    def compute_signature(
        self,
        payload: Payload,
        timestamp: str | None = None,
        delivery_id: str | None = None,
    ) -> str:
        """Return the lowercase hex HMAC-SHA256 signature for *payload*."""
        string_to_sign = build_string_to_sign(payload, timestamp, delivery_id)
        return hmac.new(self._key, string_to_sign, hashlib.sha256).hexdigest()

    def validate(
        self,
        payload: Payload,
        signature: str,
        *,
        timestamp: str | None = None,
        delivery_id: str | None = None,
    ) -> bool:
        """Return ``True`` when *signature* matches *payload*.

        Accepts the signature with or without the ``sha256=`` prefix. Malformed
        signatures of any length yield ``False``; this method never raises on
        untrusted input.
        """
        if not isinstance(signature, str):
            return False
        provided_hex = signature.removeprefix(SIGNATURE_PREFIX)
        if _HEX_DIGEST.fullmatch(provided_hex) is None:
            return False
        provided = bytes.fromhex(provided_hex)
        expected = bytes.fromhex(self.compute_signature(payload, timestamp, delivery_id))
        return hmac.compare_digest(provided, expected)
