"""CLI command implementations.

Contents:
    * Info command from :mod:`.info`
    * Send command from :mod:`.send_cmd`
"""

from __future__ import annotations

from .info import cli_info
from .send_cmd import cli_send

__all__ = [
    "cli_info",
    "cli_send",
]
