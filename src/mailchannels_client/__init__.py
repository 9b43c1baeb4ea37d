"""Typed client for the MailChannels transactional email API.

This module provides the stable public API for the package, routing imports
through the proper architectural layers:

- Domain exports: message model, DKIM merge, validation and error types
- Adapter exports: the client facade, settings and default transport
- Composition exports: layered configuration loading
- Metadata: package information

Example:
    >>> from mailchannels_client import MailChannelsClient, SendResult
    >>> client = MailChannelsClient(
    ...     api_key="key",
    ...     dkim={"domain": "example.com", "selector": "mc", "private_key": "a2V5"},
    ... )
    >>> client.base_url
    'https://api.mailchannels.net/tx/v1/'
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Adapter exports
from .adapters.mailchannels import (
    ClientSettings,
    HttpxTransport,
    MailChannelsClient,
    TransportAbortedError,
    load_client_settings_from_dict,
)

# Application ports
from .application.ports import Transport, TransportRequest, TransportResponse

# Composition exports (wired adapters)
from .composition import get_config

# Domain exports
from .domain import (
    Attachment,
    ContentBlock,
    DkimConfig,
    EmailAddress,
    Personalization,
    SendRequest,
    SendResult,
    apply_dkim_defaults,
    validate_send_request,
)
from .domain.errors import ConfigurationError, MailChannelsError, PayloadValidationError

__all__ = [
    # Client
    "ClientSettings",
    "HttpxTransport",
    "MailChannelsClient",
    "Transport",
    "TransportAbortedError",
    "TransportRequest",
    "TransportResponse",
    "load_client_settings_from_dict",
    # Models
    "Attachment",
    "ContentBlock",
    "DkimConfig",
    "EmailAddress",
    "Personalization",
    "SendRequest",
    "SendResult",
    # Behaviors
    "apply_dkim_defaults",
    "validate_send_request",
    # Errors
    "ConfigurationError",
    "MailChannelsError",
    "PayloadValidationError",
    # Configuration and metadata
    "get_config",
    "print_info",
]
