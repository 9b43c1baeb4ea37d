"""Configuration adapter - layered configuration loading.

Contents:
    * :mod:`.loader` - Configuration loading with caching and profiles
"""

from __future__ import annotations

from .loader import get_config, get_default_config_path

__all__ = [
    "get_config",
    "get_default_config_path",
]
