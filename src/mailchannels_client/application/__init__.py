"""Application layer - port definitions.

Contains port protocols that define the interfaces for adapter
implementations, including the HTTP transport boundary.

Contents:
    * :mod:`.ports` - Callable Protocol definitions and the transport request type
"""

from __future__ import annotations

from .ports import (
    CreateClient,
    GetConfig,
    InitLogging,
    LoadClientSettings,
    Transport,
    TransportRequest,
    TransportResponse,
)

__all__ = [
    "CreateClient",
    "GetConfig",
    "InitLogging",
    "LoadClientSettings",
    "Transport",
    "TransportRequest",
    "TransportResponse",
]
