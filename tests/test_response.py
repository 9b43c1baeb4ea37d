"""Response normalization: body parsing, message extraction, request ids, retry hints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mailchannels_client.adapters.mailchannels.response import (
    build_error,
    build_result,
    derive_error_message,
    extract_message,
    extract_request_id,
    interpret_response,
    is_success_status,
    parse_body,
    parse_retry_after_seconds,
    snapshot_headers,
)
from mailchannels_client.domain.errors import MailChannelsError
from mailchannels_client.domain.models import SendResult

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
JSON_HEADERS = {"Content-Type": "application/json"}


# ======================== Status and headers ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(("status", "expected"), [(199, False), (200, True), (202, True), (299, True), (300, False)])
def test_success_range_is_200_to_299(status: int, expected: bool) -> None:
    assert is_success_status(status) is expected


@pytest.mark.os_agnostic
def test_header_snapshot_lower_cases_names() -> None:
    assert snapshot_headers({"X-Request-Id": "a", "CF-Ray": "b"}) == {"x-request-id": "a", "cf-ray": "b"}


# ======================== Body parsing ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("text", "content_type"),
    [
        ("", "application/json"),
        ('{"a": 1}', None),
        ('{"a": 1}', "text/plain"),
        ("{broken", "application/json"),
    ],
)
def test_body_is_not_parsed_unless_declared_and_valid(text: str, content_type: str | None) -> None:
    assert parse_body(text, content_type) is None


@pytest.mark.os_agnostic
def test_body_content_type_match_is_case_insensitive() -> None:
    assert parse_body("[1, 2]", "Application/JSON; charset=utf-8") == [1, 2]


# ======================== Message extraction ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ({"message": " top "}, "top"),
        ({"error_description": "described"}, "described"),
        ({"detail": "detailed"}, "detailed"),
        ({"error": "plain error"}, "plain error"),
        ({"message": "first", "detail": "second"}, "first"),
        ({"message": "  ", "detail": "fallback"}, "fallback"),
        ({"error": {"message": "nested"}}, "nested"),
        ({"errors": ["from list"]}, "from list"),
        ({"errors": [{"errors": [{"message": "deep"}]}]}, "deep"),
        ({"errors": "not-a-list"}, None),
        ({"message": 42}, None),
        ([{"message": "top-level arrays are not searched"}], None),
        ("string body", None),
        (None, None),
    ],
)
def test_message_extraction_order(body: Any, expected: str | None) -> None:
    assert extract_message(body) == expected


@pytest.mark.os_agnostic
def test_error_message_prefers_json_then_raw_then_generic() -> None:
    assert derive_error_message(400, "Bad Request", {"message": "json"}, '{"message": "json"}') == "json"
    assert derive_error_message(400, "Bad Request", None, "  raw text  ") == "raw text"
    assert derive_error_message(400, "Bad Request", None, "   ") == "MailChannels request failed with 400 Bad Request"
    assert derive_error_message(400, None, None, "") == "MailChannels request failed with status 400"


# ======================== Request ids ========================


@pytest.mark.os_agnostic
def test_request_id_candidates_are_checked_in_priority_order() -> None:
    headers = {"cf-ray": "ray", "mc-request-id": "mc", "x-mc-request-id": "xmc", "x-request-id": " x "}

    assert extract_request_id(headers) == "x"
    assert extract_request_id({"cf-ray": "ray", "mc-request-id": "mc"}) == "mc"
    assert extract_request_id({"x-request-id": "  ", "cf-ray": "ray"}) == "ray"
    assert extract_request_id({}) is None


# ======================== Retry-After ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("120", 120),
        ("0", 0),
        ("-5", 0),
        (" 30 ", 30),
        ("12.7", 12),
        ("15abc", 15),
        ("Mon, 01 Jan 2024 12:00:45 GMT", 45),
        ("Mon, 01 Jan 2024 11:59:00 GMT", 0),
        ("2024-01-01T12:01:00+00:00", 2024),
        ("not-a-date", None),
        ("", None),
        (None, None),
    ],
)
def test_retry_after_parsing(value: str | None, expected: int | None) -> None:
    assert parse_retry_after_seconds(value, now=NOW) == expected


@pytest.mark.os_agnostic
def test_retry_after_date_rounds_up_partial_seconds() -> None:
    now = datetime(2024, 1, 1, 12, 0, 0, 500_000, tzinfo=timezone.utc)

    assert parse_retry_after_seconds("Mon, 01 Jan 2024 12:00:10 GMT", now=now) == 10


@pytest.mark.os_agnostic
@given(seconds=st.integers(min_value=-10_000, max_value=10_000_000))
@settings(max_examples=100)
def test_integer_retry_after_is_never_negative(seconds: int) -> None:
    """Any integer header parses to itself clamped at zero."""
    assert parse_retry_after_seconds(str(seconds), now=NOW) == max(seconds, 0)


# ======================== Result and error assembly ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("body", "headers", "expected"),
    [
        ('{"id": "x"}', JSON_HEADERS, SendResult(202, id="x")),
        ('{"id": "x", "ok": true}', JSON_HEADERS, SendResult(202, id="x", data={"id": "x", "ok": True})),
        ('{"id": ""}', JSON_HEADERS, SendResult(202, data={"id": ""})),
        ('{"id": 7}', JSON_HEADERS, SendResult(202, data={"id": 7})),
        ("[1, 2]", JSON_HEADERS, SendResult(202, data=[1, 2])),
        ("[]", JSON_HEADERS, SendResult(202)),
        ("42", JSON_HEADERS, SendResult(202, data="42")),
        ("null", JSON_HEADERS, SendResult(202, data="null")),
        ("", JSON_HEADERS, SendResult(202)),
        ("queued", {"content-type": "text/plain"}, SendResult(202, data="queued")),
    ],
)
def test_success_envelope_shapes(body: str, headers: dict[str, str], expected: SendResult) -> None:
    assert build_result(202, headers, body) == expected


@pytest.mark.os_agnostic
def test_error_snapshot_headers_are_read_only() -> None:
    error = build_error(500, "Internal Server Error", {"X-Request-Id": "req"}, "", now=NOW)

    assert error.headers == {"x-request-id": "req"}
    with pytest.raises(TypeError):
        error.headers["x-request-id"] = "changed"  # type: ignore[index]


@pytest.mark.os_agnostic
def test_error_blank_status_text_is_dropped() -> None:
    error = build_error(502, "  ", {}, "", now=NOW)

    assert error.status_text is None
    assert error.message == "MailChannels request failed with status 502"
    assert error.details is None


@pytest.mark.os_agnostic
def test_interpret_response_raises_only_outside_success_range() -> None:
    assert interpret_response(200, "OK", {}, "").status == 200

    with pytest.raises(MailChannelsError) as exc_info:
        interpret_response(301, "Moved Permanently", {}, "", now=NOW)

    assert exc_info.value.status == 301
