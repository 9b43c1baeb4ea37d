"""Adapters layer - infrastructure and framework integrations.

Contents:
    * :mod:`.mailchannels` - HTTP client, transport and response normalization
    * :mod:`.config` - Layered configuration loading
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.memory` - In-memory adapters for tests
    * :mod:`.cli` - Click CLI framework integration
"""

from __future__ import annotations

__all__: list[str] = []
