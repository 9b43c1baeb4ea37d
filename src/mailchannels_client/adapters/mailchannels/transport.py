"""Default HTTP transport backed by httpx.

The client talks to the network only through a :class:`Transport` callable.
:class:`HttpxTransport` is the one used when none is injected. It opens a
short-lived ``httpx.AsyncClient`` per request, since the client holds no
pooled connections across calls.

Transport failures (``httpx.HTTPError`` subclasses, :class:`TransportAbortedError`)
propagate unchanged so callers can tell connectivity problems apart from
API-level rejections.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from mailchannels_client.application.ports import TransportRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class TransportAbortedError(Exception):
    """The request's cancellation signal fired before a response arrived.

    Example:
        >>> str(TransportAbortedError("aborted by caller"))
        'aborted by caller'
    """


@dataclass(frozen=True, slots=True)
class HttpxResponse:
    """Response view over a fully read ``httpx.Response``."""

    response: httpx.Response

    @property
    def status(self) -> int:
        return self.response.status_code

    @property
    def status_text(self) -> str:
        return self.response.reason_phrase

    @property
    def headers(self) -> Mapping[str, str]:
        return self.response.headers

    async def text(self) -> str:
        return self.response.text


async def _cancel_and_wait(task: asyncio.Task[httpx.Response]) -> None:
    """Cancel *task* and wait until it has stopped."""
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


async def _race_signal(task: asyncio.Task[httpx.Response], signal: asyncio.Event) -> httpx.Response:
    """Wait for *task*, cancelling it when *signal* is set first.

    The request is also cancelled when the waiting coroutine itself is
    cancelled, so no request outlives its caller.
    """
    waiter = asyncio.ensure_future(signal.wait())
    try:
        done, _pending = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except BaseException:
        if not task.done():
            await _cancel_and_wait(task)
        raise
    finally:
        waiter.cancel()
    if task in done:
        return task.result()
    await _cancel_and_wait(task)
    raise TransportAbortedError("Request aborted by cancellation signal")


class HttpxTransport:
    """Async :class:`~mailchannels_client.application.ports.Transport` using httpx.

    Args:
        timeout: Per-request timeout in seconds.
        client: Optional externally owned ``httpx.AsyncClient``. When given it
            is reused and never closed by the transport.

    Example:
        >>> transport = HttpxTransport(timeout=10.0)
        >>> transport.timeout
        10.0
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT_SECONDS, client: httpx.AsyncClient | None = None) -> None:
        self.timeout = timeout
        self._client = client

    async def _send(self, client: httpx.AsyncClient, url: str, request: TransportRequest) -> httpx.Response:
        return await client.request(
            request.method,
            url,
            headers=dict(request.headers),
            content=request.body.encode("utf-8"),
            timeout=self.timeout,
        )

    async def _dispatch(self, client: httpx.AsyncClient, url: str, request: TransportRequest) -> httpx.Response:
        if request.signal is None:
            return await self._send(client, url, request)
        if request.signal.is_set():
            raise TransportAbortedError("Request aborted before it was sent")
        task = asyncio.ensure_future(self._send(client, url, request))
        return await _race_signal(task, request.signal)

    async def __call__(self, url: str, request: TransportRequest) -> HttpxResponse:
        logger.debug("Dispatching HTTP request", extra={"method": request.method, "url": url})
        if self._client is not None:
            return HttpxResponse(await self._dispatch(self._client, url, request))
        async with httpx.AsyncClient() as client:
            return HttpxResponse(await self._dispatch(client, url, request))


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "HttpxResponse",
    "HttpxTransport",
    "TransportAbortedError",
]
