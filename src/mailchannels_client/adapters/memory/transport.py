"""In-memory transport adapters for testing.

Provides a transport that satisfies the same Protocol as
:class:`~mailchannels_client.adapters.mailchannels.transport.HttpxTransport`
but performs no network I/O.

Contents:
    * :class:`StaticResponse` - Canned response returned by the spy.
    * :class:`RecordingTransport` - Captures requests for test assertions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import orjson

from ...application.ports import TransportRequest


def _empty_headers() -> dict[str, str]:
    """Create an empty typed header mapping."""
    return {}


@dataclass(frozen=True, slots=True)
class StaticResponse:
    """Fixed response satisfying the TransportResponse protocol.

    Example:
        >>> response = StaticResponse.json({"id": "message-id"}, status=202)
        >>> response.status, response.headers["content-type"]
        (202, 'application/json')
    """

    status: int = 200
    body: str = ""
    status_text: str = ""
    headers: Mapping[str, str] = field(default_factory=_empty_headers)

    @classmethod
    def json(
        cls,
        payload: object,
        *,
        status: int = 200,
        status_text: str = "",
        headers: Mapping[str, str] | None = None,
    ) -> StaticResponse:
        """Build a response with a JSON body and content type."""
        merged = {"content-type": "application/json", **(headers or {})}
        return cls(status=status, body=orjson.dumps(payload).decode("utf-8"), status_text=status_text, headers=merged)

    async def text(self) -> str:
        return self.body


@dataclass(frozen=True, slots=True)
class RecordedCall:
    """One captured transport invocation."""

    url: str
    request: TransportRequest

    def json_body(self) -> object:
        return orjson.loads(self.request.body)


def _empty_calls() -> list[RecordedCall]:
    """Create an empty typed list for captured calls."""
    return []


def _empty_responses() -> list[StaticResponse]:
    """Create an empty typed list for queued responses."""
    return []


@dataclass
class RecordingTransport:
    """Captures transport calls for test assertions.

    Each test should create its own instance to avoid cross-test pollution.
    Queued responses are returned in order; once the queue is empty
    ``default_response`` is returned.

    Attributes:
        calls: Captured ``(url, request)`` pairs.
        responses: Responses returned in FIFO order.
        default_response: Response used when the queue is empty.
        raise_exception: When set, calls record and then raise this exception.

    Example:
        >>> import asyncio
        >>> from mailchannels_client.application.ports import TransportRequest
        >>> spy = RecordingTransport()
        >>> response = asyncio.run(spy("https://x/send", TransportRequest("POST", {}, "{}")))
        >>> response.status, len(spy.calls)
        (200, 1)
    """

    calls: list[RecordedCall] = field(default_factory=_empty_calls)
    responses: list[StaticResponse] = field(default_factory=_empty_responses)
    default_response: StaticResponse = field(default_factory=StaticResponse)
    raise_exception: BaseException | None = None

    def queue(self, *responses: StaticResponse) -> RecordingTransport:
        self.responses.extend(responses)
        return self

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.calls.clear()
        self.responses.clear()
        self.raise_exception = None

    @property
    def last_call(self) -> RecordedCall:
        return self.calls[-1]

    async def __call__(self, url: str, request: TransportRequest) -> StaticResponse:
        self.calls.append(RecordedCall(url=url, request=request))
        if self.raise_exception is not None:
            raise self.raise_exception
        if self.responses:
            return self.responses.pop(0)
        return self.default_response


__all__ = [
    "RecordedCall",
    "RecordingTransport",
    "StaticResponse",
]
