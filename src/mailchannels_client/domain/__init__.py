"""Domain layer - pure message model, DKIM merge and validation with no I/O.

Contents:
    * :mod:`.models` - Payload value types, DKIM defaults, send result
    * :mod:`.dkim` - Three-tier DKIM default resolution
    * :mod:`.validation` - Structural payload validation
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .dkim import apply_dkim_defaults
from .errors import ConfigurationError, MailChannelsError, PayloadValidationError
from .models import (
    Attachment,
    ContentBlock,
    DkimConfig,
    EmailAddress,
    Personalization,
    SendRequest,
    SendResult,
)
from .validation import validate_send_request

__all__ = [
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
]
