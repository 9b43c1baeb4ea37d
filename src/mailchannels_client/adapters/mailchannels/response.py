"""Turn raw HTTP responses into a SendResult or a MailChannelsError.

Everything here is pure: the caller reads the body text from the transport
and hands status, reason phrase, headers and text to
:func:`interpret_response`.

Error message precedence:
    1. A usable string found in a JSON object body (see :func:`extract_message`).
    2. The trimmed raw body text.
    3. ``MailChannels request failed with <status> <status text>``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, cast

import orjson

from mailchannels_client.domain.dkim import has_text
from mailchannels_client.domain.errors import MailChannelsError
from mailchannels_client.domain.models import SendResult

#: Correlation id headers, checked in priority order.
REQUEST_ID_HEADER_CANDIDATES: tuple[str, ...] = (
    "x-request-id",
    "x-mc-request-id",
    "mc-request-id",
    "cf-ray",
)

#: Keys probed for a human-readable message at each level of an error body.
MESSAGE_KEY_CANDIDATES: tuple[str, ...] = ("message", "error_description", "detail", "error")

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


def is_success_status(status: int) -> bool:
    return 200 <= status <= 299


def snapshot_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy *headers* with lower-cased names.

    Example:
        >>> snapshot_headers({"X-Request-Id": "abc", "Retry-After": "5"})
        {'x-request-id': 'abc', 'retry-after': '5'}
    """
    return {name.lower(): value for name, value in headers.items()}


def parse_body(text: str, content_type: str | None) -> Any:
    """Decode *text* as JSON when the content type declares it.

    Returns ``None`` when the body is empty, not declared as JSON, or fails
    to decode. A decode failure is never raised.

    Example:
        >>> parse_body('{"id": "x"}', "application/json; charset=utf-8")
        {'id': 'x'}
        >>> parse_body("not json", "application/json") is None
        True
    """
    if not text or not content_type or "application/json" not in content_type.lower():
        return None
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        return None


def extract_message(body: Any) -> str | None:
    """Search a JSON error body depth-first for a usable message.

    Order: top-level candidate keys, then a nested ``error`` object, then
    each entry of an ``errors`` array (strings directly, objects
    recursively). The first non-blank string wins, trimmed.

    Example:
        >>> extract_message({"errors": ["   ", {"extra": True}, {"error": {"error_description": "final"}}]})
        'final'
        >>> extract_message({"error": {"message": "nested"}, "errors": ["later"]})
        'nested'
        >>> extract_message({"errors": []}) is None
        True
    """
    if not isinstance(body, dict):
        return None
    record = cast(dict[str, Any], body)

    for key in MESSAGE_KEY_CANDIDATES:
        value = record.get(key)
        if has_text(value):
            return cast(str, value).strip()

    nested = extract_message(record.get("error"))
    if nested:
        return nested

    errors = record.get("errors")
    if isinstance(errors, list):
        for entry in cast(list[Any], errors):
            if has_text(entry):
                return cast(str, entry).strip()
            found = extract_message(entry)
            if found:
                return found

    return None


def derive_error_message(status: int, status_text: str | None, parsed_body: Any, raw_text: str) -> str:
    """Pick the error message following JSON > raw text > generic fallback.

    Example:
        >>> derive_error_message(503, "Service Unavailable", None, "")
        'MailChannels request failed with 503 Service Unavailable'
        >>> derive_error_message(500, None, None, "")
        'MailChannels request failed with status 500'
    """
    message = extract_message(parsed_body)
    if message:
        return message
    if has_text(raw_text):
        return raw_text.strip()
    if status_text:
        return f"MailChannels request failed with {status} {status_text}"
    return f"MailChannels request failed with status {status}"


def extract_request_id(headers: Mapping[str, str]) -> str | None:
    """Return the first non-blank correlation id from lower-cased *headers*."""
    for name in REQUEST_ID_HEADER_CANDIDATES:
        value = headers.get(name)
        if has_text(value):
            return cast(str, value).strip()
    return None


def _parse_http_date(value: str) -> datetime | None:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_retry_after_seconds(value: str | None, *, now: datetime | None = None) -> int | None:
    """Parse a ``Retry-After`` header into whole seconds.

    A leading integer is used directly (negative values clamp to zero).
    Otherwise the value is read as an HTTP date and converted to the number
    of seconds from *now*, rounded up and clamped to zero. Anything else
    yields ``None``.

    Example:
        >>> parse_retry_after_seconds("120")
        120
        >>> parse_retry_after_seconds("-5")
        0
        >>> now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> parse_retry_after_seconds("Mon, 01 Jan 2024 00:00:45 GMT", now=now)
        45
        >>> parse_retry_after_seconds("Sun, 31 Dec 2023 23:59:00 GMT", now=now)
        0
        >>> parse_retry_after_seconds("not-a-date") is None
        True
    """
    if not value:
        return None

    match = _LEADING_INTEGER.match(value)
    if match:
        return max(int(match.group(1)), 0)

    parsed = _parse_http_date(value)
    if parsed is None:
        return None

    reference = now if now is not None else datetime.now(timezone.utc)
    delta = (parsed - reference).total_seconds()
    if delta > 0:
        return math.ceil(delta)
    return 0


def build_error(
    status: int,
    status_text: str | None,
    headers: Mapping[str, str],
    raw_text: str,
    *,
    now: datetime | None = None,
) -> MailChannelsError:
    """Assemble the structured error for a non-success response."""
    snapshot = snapshot_headers(headers)
    parsed = parse_body(raw_text, snapshot.get("content-type"))
    normalized_status_text = status_text.strip() if has_text(status_text) else None
    if parsed is not None:
        details: Any = parsed
    else:
        details = raw_text if raw_text else None

    return MailChannelsError(
        derive_error_message(status, normalized_status_text, parsed, raw_text),
        status=status,
        status_text=normalized_status_text,
        request_id=extract_request_id(snapshot),
        retry_after_seconds=parse_retry_after_seconds(snapshot.get("retry-after"), now=now),
        headers=snapshot,
        details=details,
    )


def build_result(status: int, headers: Mapping[str, str], raw_text: str) -> SendResult:
    """Assemble the success envelope.

    A string ``id`` is surfaced on its own; the parsed body is attached as
    ``data`` only when it carries more than that id.

    Example:
        >>> json_headers = {"content-type": "application/json"}
        >>> build_result(202, json_headers, '{"id": "x"}')
        SendResult(status=202, id='x', data=None)
        >>> build_result(202, json_headers, '{"id": "x", "ok": true}').data
        {'id': 'x', 'ok': True}
        >>> build_result(200, {"content-type": "text/plain"}, "success").data
        'success'
    """
    snapshot = snapshot_headers(headers)
    parsed = parse_body(raw_text, snapshot.get("content-type"))

    response_id: str | None = None
    data: Any = None
    if isinstance(parsed, (dict, list)):
        if isinstance(parsed, dict):
            candidate = cast(dict[str, Any], parsed).get("id")
            if isinstance(candidate, str) and candidate:
                response_id = candidate
        if len(cast(Any, parsed)) > (1 if response_id else 0):
            data = parsed
    elif raw_text:
        data = raw_text

    return SendResult(status=status, id=response_id, data=data)


def interpret_response(
    status: int,
    status_text: str | None,
    headers: Mapping[str, str],
    raw_text: str,
    *,
    now: datetime | None = None,
) -> SendResult:
    """Return the success envelope, or raise the structured error.

    Raises:
        MailChannelsError: When *status* is outside 200-299.
    """
    if not is_success_status(status):
        raise build_error(status, status_text, headers, raw_text, now=now)
    return build_result(status, headers, raw_text)


__all__ = [
    "MESSAGE_KEY_CANDIDATES",
    "REQUEST_ID_HEADER_CANDIDATES",
    "build_error",
    "build_result",
    "derive_error_message",
    "extract_message",
    "extract_request_id",
    "interpret_response",
    "is_success_status",
    "parse_body",
    "parse_retry_after_seconds",
    "snapshot_headers",
]
