"""Tests for exchange request headers and response mapping."""

from __future__ import annotations

import json
import logging

import pytest

from pytokenserver._api.exchange import build_exchange_headers, parse_exchange_response
from pytokenserver._transport import RawResponse
from pytokenserver.config import TokenServerConfig
from pytokenserver.models import LocalError, RemoteError, RemoteErrorDetail

TOKEN_BODY: dict = {
    "id": "token-id",
    "key": "token-key",
    "api_endpoint": "https://sync.example.com/1.5/42",
    "uid": 42,
    "hashed_fxa_uid": "hashed-uid",
    "duration": 3600,
}

AUTH_FAILURE_BODY: dict = {
    "status": "error",
    "errors": [{"location": "body", "name": "", "description": "Unauthorized"}],
}


def _response(status: int, body: object, headers: dict[str, str] | None = None) -> RawResponse:
    text = body if isinstance(body, str) else json.dumps(body)
    return RawResponse(status=status, headers=headers or {}, text=text)


class TestBuildExchangeHeaders:
    def test_browserid_authorization(self) -> None:
        headers = build_exchange_headers(TokenServerConfig(user_agent="tests/1.0"), "BAD ASSERTION")
        assert headers["Authorization"] == "BrowserID BAD ASSERTION"
        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"] == "tests/1.0"
        assert "X-Client-State" not in headers

    def test_client_state(self) -> None:
        headers = build_exchange_headers(TokenServerConfig(), "assertion", client_state="616263")
        assert headers["X-Client-State"] == "616263"


class TestParseSuccess:
    def test_token_with_header_timestamp(self) -> None:
        result = parse_exchange_response(_response(200, TOKEN_BODY, {"X-Timestamp": "1429121686.49"}))
        token = result.unwrap()
        assert token.uid == 42
        assert token.api_endpoint.endswith(str(token.uid))
        assert token.remote_timestamp == 1429121686490

    def test_header_lookup_is_case_insensitive(self) -> None:
        result = parse_exchange_response(_response(200, TOKEN_BODY, {"x-timestamp": "1429121686"}))
        assert result.unwrap().remote_timestamp == 1429121686000

    def test_body_timestamp_fallback(self) -> None:
        result = parse_exchange_response(_response(200, {**TOKEN_BODY, "remoteTimestamp": 1429121686000}))
        assert result.unwrap().remote_timestamp == 1429121686000

    def test_any_2xx_is_success(self) -> None:
        result = parse_exchange_response(_response(201, TOKEN_BODY, {"X-Timestamp": "1429121686"}))
        assert result.is_success


class TestParseLocalFailures:
    @pytest.mark.parametrize("missing", ["id", "key", "api_endpoint", "uid", "hashed_fxa_uid"])
    def test_missing_field_is_local_without_cause(self, missing: str) -> None:
        body = {k: v for k, v in TOKEN_BODY.items() if k != missing}
        result = parse_exchange_response(_response(200, body, {"X-Timestamp": "1429121686"}))
        assert result.success_value is None
        assert result.failure_value == LocalError()

    def test_uid_suffix_violation_is_local(self, caplog: pytest.LogCaptureFixture) -> None:
        body = {**TOKEN_BODY, "api_endpoint": "https://sync.example.com/1.5/43"}
        with caplog.at_level(logging.WARNING, logger="pytokenserver._api.exchange"):
            result = parse_exchange_response(_response(200, body, {"X-Timestamp": "1429121686"}))
        assert isinstance(result.failure_value, LocalError)
        assert "invalid token" in caplog.text

    def test_missing_timestamp_is_local(self) -> None:
        result = parse_exchange_response(_response(200, TOKEN_BODY))
        assert result.failure_value == LocalError()

    def test_non_object_body_is_local(self) -> None:
        result = parse_exchange_response(_response(200, [TOKEN_BODY], {"X-Timestamp": "1429121686"}))
        assert result.failure_value == LocalError()

    @pytest.mark.parametrize("status", [200, 401, 503])
    def test_unparseable_body_is_local_with_cause(self, status: int) -> None:
        result = parse_exchange_response(_response(status, "<html>Service Unavailable</html>"))
        error = result.failure_value
        assert isinstance(error, LocalError)
        assert isinstance(error.cause, json.JSONDecodeError)
        assert "json.decoder.JSONDecodeError" in str(error)

    def test_empty_body_is_local(self) -> None:
        result = parse_exchange_response(_response(503, ""))
        assert isinstance(result.failure_value, LocalError)

    @pytest.mark.parametrize("status", [200, 401])
    def test_oversized_integer_is_local(self, status: int) -> None:
        text = '{"status": "error", "uid": ' + "9" * 5000 + "}"
        error = parse_exchange_response(_response(status, text)).failure_value
        assert isinstance(error, LocalError)
        assert isinstance(error.cause, ValueError)

    def test_deeply_nested_body_is_local(self) -> None:
        error = parse_exchange_response(_response(401, "[" * 100000)).failure_value
        assert isinstance(error, LocalError)
        assert isinstance(error.cause, (RecursionError, ValueError))

    @pytest.mark.parametrize("text", ["[1, 2]", '"oops"', "null", "42"])
    def test_non_object_error_body_is_local(self, text: str) -> None:
        result = parse_exchange_response(_response(500, text, {"X-Timestamp": "1429121686"}))
        assert result.failure_value == LocalError()


class TestParseRemoteFailures:
    def test_overflowing_timestamp_header_is_ignored(self) -> None:
        result = parse_exchange_response(_response(401, {"status": "error"}, {"X-Timestamp": "1e999999"}))
        assert result.failure_value == RemoteError(code=401, status="error", remote_timestamp=None)

    def test_bad_assertion(self) -> None:
        result = parse_exchange_response(_response(401, AUTH_FAILURE_BODY, {"X-Timestamp": "1429121686.49"}))
        error = result.failure_value
        assert isinstance(error, RemoteError)
        assert error.code == 401
        assert error.status == "error"
        assert error.remote_timestamp == 1429121686490
        assert error.errors == (RemoteErrorDetail(location="body", name="", description="Unauthorized"),)
        assert error.is_auth_failure

    def test_status_absent(self) -> None:
        result = parse_exchange_response(_response(500, {"message": "boom"}))
        assert result.failure_value == RemoteError(code=500, status=None, remote_timestamp=None)

    def test_non_string_status_dropped(self) -> None:
        result = parse_exchange_response(_response(400, {"status": 7}))
        assert isinstance(result.failure_value, RemoteError)
        assert result.failure_value.status is None

    def test_body_timestamp_used_without_header(self) -> None:
        result = parse_exchange_response(_response(401, {"status": "error", "timestamp": 1429121686}))
        assert isinstance(result.failure_value, RemoteError)
        assert result.failure_value.remote_timestamp == 1429121686000

    def test_malformed_error_entries_skipped(self) -> None:
        body = {"status": "error", "errors": ["oops", {"location": 5}, {"name": "generation"}]}
        result = parse_exchange_response(_response(401, body))
        assert isinstance(result.failure_value, RemoteError)
        assert result.failure_value.errors == (RemoteErrorDetail(name="generation"),)

    @pytest.mark.parametrize(
        ("headers", "expected"),
        [
            ({"Retry-After": "120"}, 120),
            ({"X-Backoff": "30"}, 30),
            ({"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT", "X-Weave-Backoff": "60"}, 60),
            ({}, None),
        ],
    )
    def test_backoff_hint(self, headers: dict[str, str], expected: int | None) -> None:
        result = parse_exchange_response(_response(503, {"status": "error"}, headers))
        assert isinstance(result.failure_value, RemoteError)
        assert result.failure_value.retry_after == expected
