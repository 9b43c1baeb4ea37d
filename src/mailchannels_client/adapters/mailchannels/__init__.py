"""MailChannels adapter - HTTP client for the transactional ``send`` endpoint.

Structure:
    * :mod:`.config` - Client settings model and loader
    * :mod:`.client` - DKIM-aware client facade
    * :mod:`.response` - Response and error normalization
    * :mod:`.transport` - Default httpx transport

Contents:
    * :class:`.client.MailChannelsClient` - Primary sending interface
    * :class:`.config.ClientSettings` - Client settings container
    * :func:`.config.load_client_settings_from_dict` - Config dict loader
    * :class:`.transport.HttpxTransport` - Default transport
"""

from __future__ import annotations

from .client import MailChannelsClient, create_client
from .config import ClientSettings, load_client_settings_from_dict
from .response import interpret_response
from .transport import HttpxTransport, TransportAbortedError

__all__ = [
    "ClientSettings",
    "HttpxTransport",
    "MailChannelsClient",
    "TransportAbortedError",
    "create_client",
    "interpret_response",
    "load_client_settings_from_dict",
]
