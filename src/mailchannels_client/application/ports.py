"""Application ports: Protocol definitions for adapter functions and the transport.

Each Protocol class defines a ``__call__`` method whose signature exactly
matches the corresponding adapter. Existing functions and classes satisfy
these protocols automatically via structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``ClientSettings``, ``MailChannelsClient``) are imported under
    ``TYPE_CHECKING`` only so that layer contracts remain satisfied at runtime.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.mailchannels.client import MailChannelsClient
    from ..adapters.mailchannels.config import ClientSettings


@dataclass(frozen=True, slots=True)
class TransportRequest:
    """Request description handed to a :class:`Transport`.

    Attributes:
        method: HTTP method, always ``POST`` for the send endpoint.
        headers: Outbound headers in insertion order.
        body: JSON-encoded request body.
        signal: Optional cancellation event; transports abort the request
            once it is set.
    """

    method: str
    headers: Mapping[str, str]
    body: str
    signal: asyncio.Event | None = field(default=None, compare=False)


class TransportResponse(Protocol):
    """Minimal response surface consumed by the response normalizer."""

    @property
    def status(self) -> int: ...

    @property
    def status_text(self) -> str: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    async def text(self) -> str: ...


class Transport(Protocol):
    """Issue one HTTP request and return the response."""

    async def __call__(self, url: str, request: TransportRequest) -> TransportResponse: ...


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


class LoadClientSettings(Protocol):
    """Load ClientSettings from a configuration dictionary."""

    def __call__(self, config_dict: Mapping[str, Any]) -> ClientSettings: ...


class CreateClient(Protocol):
    """Build a ready-to-use client from validated settings."""

    def __call__(self, settings: ClientSettings) -> MailChannelsClient: ...


__all__ = [
    "CreateClient",
    "GetConfig",
    "InitLogging",
    "LoadClientSettings",
    "Transport",
    "TransportRequest",
    "TransportResponse",
]
