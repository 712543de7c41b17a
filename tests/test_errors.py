from __future__ import annotations

from typing import Any

import httpx
import pytest

from vocafuse import ErrorContext, ErrorKind, VocaFuseError, classify_error
from vocafuse.error_handler import detect_resource_type, extract_resource_id, parse_retry_after

BASE_URL = "https://api.vocafuse.com"


def _status_error(
    status: int,
    path: str,
    body: Any = None,
    headers: dict[str, str] | None = None,
) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", f"{BASE_URL}{path}")
    response = httpx.Response(status, json=body, headers=headers, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


def _envelope(message: str, code: str | None = None, **details: Any) -> dict[str, Any]:
    error: dict[str, Any] = {"message": message}
    if code is not None:
        error["code"] = code
    if details:
        error["details"] = details
    return {"error": error}


class TestErrorTaxonomy:
    def test_authentication_sets_status_and_default_suggestion(self) -> None:
        error = VocaFuseError.authentication("Invalid credentials", "invalid_key")

        assert error.kind is ErrorKind.AUTHENTICATION
        assert error.status_code == 401
        assert error.error_code == "invalid_key"
        assert error.context.suggestion is not None
        assert "API key and secret" in error.context.suggestion

    def test_caller_suggestion_is_preserved(self) -> None:
        error = VocaFuseError.authorization(
            "Forbidden", context=ErrorContext(suggestion="Ask an admin.")
        )

        assert error.status_code == 403
        assert error.context.suggestion == "Ask an admin."

    def test_validation_and_conflict_have_no_default_suggestion(self) -> None:
        assert VocaFuseError.validation("Bad request").context.suggestion is None
        assert VocaFuseError.conflict("Duplicate").context.suggestion is None
        assert VocaFuseError.conflict("Duplicate").status_code == 409

    def test_rate_limit_suggestion_mentions_wait(self) -> None:
        with_wait = VocaFuseError.rate_limit("Slow down", retry_after=30)
        without_wait = VocaFuseError.rate_limit("Slow down")

        assert with_wait.retry_after == 30
        assert with_wait.context.suggestion == "Rate limit exceeded. Retry after 30 seconds."
        assert without_wait.retry_after is None
        assert without_wait.context.suggestion is not None
        assert "reduce request frequency" in without_wait.context.suggestion

    def test_server_error_keeps_actual_status(self) -> None:
        error = VocaFuseError.server("Bad gateway", 502)

        assert error.kind is ErrorKind.SERVER
        assert error.status_code == 502

    def test_resource_not_found_kinds(self) -> None:
        voicenote = VocaFuseError.voicenote_not_found("Missing", voicenote_id="vn_1")
        transcription = VocaFuseError.transcription_not_found("Missing", voicenote_id="vn_1")
        webhook = VocaFuseError.webhook_not_found("Missing", webhook_id="wh_1")
        api_key = VocaFuseError.api_key_not_found("Missing", api_key_id="ak_1")

        assert voicenote.kind is ErrorKind.VOICENOTE_NOT_FOUND
        assert voicenote.context.resource_type == "voicenote"
        assert voicenote.context.resource_id == "vn_1"
        assert transcription.context.suggestion is not None
        assert "still be processing" in transcription.context.suggestion
        assert webhook.context.resource_id == "wh_1"
        assert api_key.context.resource_type == "api_key"
        for error in (voicenote, transcription, webhook, api_key):
            assert error.status_code == 404
            assert error.is_not_found
        assert not VocaFuseError.conflict("x").is_not_found

    def test_friendly_message_composes_context(self) -> None:
        error = VocaFuseError.voicenote_not_found("Voicenote not found", voicenote_id="vn_9")

        assert error.friendly_message == (
            "Voicenote not found (voicenote: vn_9). "
            "Verify the voicenote ID exists and belongs to your account."
        )
        assert VocaFuseError("Plain").friendly_message == "Plain"

    def test_to_dict_is_plain_record(self) -> None:
        error = VocaFuseError.validation("Bad field", "invalid_param", {"field": "limit"})

        record = error.to_dict()

        assert record["kind"] == "validation_error"
        assert record["status_code"] == 400
        assert record["error_code"] == "invalid_param"
        assert record["details"] == {"field": "limit"}
        assert record["context"]["suggestion"] is None
        assert record["friendly_message"] == "Bad field"

    def test_details_are_read_only(self) -> None:
        error = VocaFuseError("x", details={"a": 1})

        assert error.details is not None
        with pytest.raises(TypeError):
            error.details["a"] = 2  # type: ignore[index]

    def test_error_is_an_exception_with_message(self) -> None:
        error = VocaFuseError("Something broke")

        assert isinstance(error, Exception)
        assert str(error) == "Something broke"
        assert error.kind is ErrorKind.GENERIC


class TestResourceDetection:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/voicenotes/vn_1/transcription", "transcription"),
            ("voicenotes/vn_1/transcription", "transcription"),
            ("/voicenotes/vn_1", "voicenote"),
            ("voicenotes", "voicenote"),
            ("/webhooks/wh_1", "webhook"),
            ("/account/api-keys/ak_1", "api_key"),
            ("/account", None),
            ("", None),
            (None, None),
        ],
    )
    def test_detect_resource_type(self, path: str | None, expected: str | None) -> None:
        assert detect_resource_type(path) == expected

    @pytest.mark.parametrize(
        ("path", "resource_type", "expected"),
        [
            ("/voicenotes/vn_123", "voicenote", "vn_123"),
            ("voicenotes/vn_123", "voicenote", "vn_123"),
            ("/voicenotes/vn_123/transcription", "transcription", "vn_123"),
            ("/webhooks/wh_5/", "webhook", "wh_5"),
            ("account/api-keys/ak_7", "api_key", "ak_7"),
            ("/voicenotes", "voicenote", None),
            ("/voicenotes/vn_1", "unknown", None),
        ],
    )
    def test_extract_resource_id(
        self, path: str, resource_type: str, expected: str | None
    ) -> None:
        assert extract_resource_id(path, resource_type) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("60", 60), (" 5 ", 5), ("120.5", 120), ("soon", None), ("", None), (None, None)],
    )
    def test_parse_retry_after(self, value: str | None, expected: int | None) -> None:
        assert parse_retry_after(value) == expected


class TestClassifyError:
    def test_passes_typed_errors_through(self) -> None:
        original = VocaFuseError.conflict("Duplicate")

        assert classify_error(original) is original

    def test_wraps_local_exception_as_generic(self) -> None:
        error = classify_error(RuntimeError("disk on fire"))

        assert error.kind is ErrorKind.GENERIC
        assert error.message == "disk on fire"
        assert error.status_code is None

    def test_wraps_transport_error_without_status(self) -> None:
        request = httpx.Request("GET", f"{BASE_URL}/voicenotes")
        error = classify_error(httpx.ConnectError("connection refused", request=request))

        assert error.kind is ErrorKind.GENERIC
        assert error.status_code is None
        assert error.message == "connection refused"
        assert error.context.endpoint == "/voicenotes"

    @pytest.mark.parametrize(
        ("status", "kind"),
        [
            (400, ErrorKind.VALIDATION),
            (401, ErrorKind.AUTHENTICATION),
            (403, ErrorKind.AUTHORIZATION),
            (409, ErrorKind.CONFLICT),
            (429, ErrorKind.RATE_LIMIT),
            (500, ErrorKind.SERVER),
            (503, ErrorKind.SERVER),
            (418, ErrorKind.GENERIC),
        ],
    )
    def test_dispatches_on_status(self, status: int, kind: ErrorKind) -> None:
        error = classify_error(_status_error(status, "/account", _envelope("nope")))

        assert error.kind is kind
        assert error.status_code == status
        assert error.message == "nope"
        assert error.context.endpoint == "/account"

    def test_extracts_code_and_details(self) -> None:
        body = _envelope("Invalid limit", "invalid_param", field="limit")
        error = classify_error(_status_error(400, "/voicenotes", body))

        assert error.error_code == "invalid_param"
        assert error.details == {"field": "limit"}

    def test_voicenote_not_found_carries_id(self) -> None:
        error = classify_error(_status_error(404, "/voicenotes/vn_42", _envelope("Not found")))

        assert error.kind is ErrorKind.VOICENOTE_NOT_FOUND
        assert error.context.resource_type == "voicenote"
        assert error.context.resource_id == "vn_42"

    def test_transcription_not_found_uses_voicenote_id(self) -> None:
        error = classify_error(
            _status_error(404, "/voicenotes/vn_42/transcription", _envelope("Not found"))
        )

        assert error.kind is ErrorKind.TRANSCRIPTION_NOT_FOUND
        assert error.context.resource_id == "vn_42"

    def test_webhook_and_api_key_not_found(self) -> None:
        webhook = classify_error(_status_error(404, "/webhooks/wh_1", _envelope("x")))
        api_key = classify_error(_status_error(404, "/account/api-keys/ak_1", _envelope("x")))

        assert webhook.kind is ErrorKind.WEBHOOK_NOT_FOUND
        assert webhook.context.resource_id == "wh_1"
        assert api_key.kind is ErrorKind.API_KEY_NOT_FOUND
        assert api_key.context.resource_id == "ak_1"

    def test_unrecognised_path_yields_generic_not_found(self) -> None:
        error = classify_error(_status_error(404, "/unknown/thing", _envelope("Not found")))

        assert error.kind is ErrorKind.NOT_FOUND
        assert error.context.resource_id is None
        assert error.is_not_found

    def test_rate_limit_reads_retry_after_header(self) -> None:
        error = classify_error(
            _status_error(429, "/voicenotes", _envelope("Too many"), {"Retry-After": "60"})
        )

        assert error.kind is ErrorKind.RATE_LIMIT
        assert error.retry_after == 60
        assert error.context.suggestion == "Rate limit exceeded. Retry after 60 seconds."

    def test_falls_back_to_transport_message_for_non_json_body(self) -> None:
        request = httpx.Request("GET", f"{BASE_URL}/account")
        response = httpx.Response(502, text="<html>bad gateway</html>", request=request)
        error = classify_error(
            httpx.HTTPStatusError("Server error '502 Bad Gateway'", request=request, response=response)
        )

        assert error.kind is ErrorKind.SERVER
        assert error.message == "Server error '502 Bad Gateway'"

    def test_falls_back_to_generic_message(self) -> None:
        request = httpx.Request("GET", f"{BASE_URL}/account")
        response = httpx.Response(500, request=request)
        error = classify_error(httpx.HTTPStatusError("", request=request, response=response))

        assert error.message == "An error occurred"
