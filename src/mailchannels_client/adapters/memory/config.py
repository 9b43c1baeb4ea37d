"""In-memory configuration adapter for testing.

Provides a configuration loader that satisfies the same Protocol as the
production adapter but operates entirely in memory -- no filesystem,
no layered discovery.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lib_layered_config import Config


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return an empty in-memory Config."""
    return Config({}, {})


def config_from_mapping(data: Mapping[str, Any]) -> Config:
    """Wrap *data* in a real Config without provenance information."""
    return Config(dict(data), {})


__all__ = [
    "config_from_mapping",
    "get_config_in_memory",
]
