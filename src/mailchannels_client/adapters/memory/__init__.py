"""In-memory adapter implementations for testing.

Provides lightweight implementations of the application ports that operate
entirely in memory -- no filesystem, no network, no logging framework.

Contents:
    * :mod:`.config` - In-memory configuration adapter
    * :mod:`.transport` - Recording transport and canned responses
    * :mod:`.logging` - In-memory logging adapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import config_from_mapping, get_config_in_memory
from .logging import init_logging_in_memory
from .transport import RecordedCall, RecordingTransport, StaticResponse

# Static conformance assertions
if TYPE_CHECKING:
    from mailchannels_client.application.ports import GetConfig, InitLogging, Transport

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_transport: Transport = RecordingTransport()

__all__ = [
    "RecordedCall",
    "RecordingTransport",
    "StaticResponse",
    "config_from_mapping",
    "get_config_in_memory",
    "init_logging_in_memory",
]
