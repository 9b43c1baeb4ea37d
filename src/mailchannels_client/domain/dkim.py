"""Three-tier DKIM default resolution.

Precedence per field is personalization override > request body override >
client default. Each field (domain, selector, private key) resolves
independently, so the three values of one triple may come from different
tiers. The merge is a pure fold: the input request is never modified.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from .models import DkimConfig, Personalization, SendRequest


def has_text(value: Any) -> bool:
    """Return True when *value* is a string with non-whitespace content.

    Example:
        >>> has_text(" x "), has_text("   "), has_text(None)
        (True, False, False)
    """
    return isinstance(value, str) and bool(value.strip())


def select_dkim_value(value: Any, fallback: str) -> str:
    """Return the trimmed candidate when usable, else the trimmed fallback.

    Example:
        >>> select_dkim_value("  override.example.com ", "example.com")
        'override.example.com'
        >>> select_dkim_value("   ", " example.com ")
        'example.com'
    """
    if has_text(value):
        return value.strip()
    return fallback.strip()


def _merge_personalization(personalization: Personalization, body: SendRequest) -> Personalization:
    return replace(
        personalization,
        dkim_domain=select_dkim_value(personalization.dkim_domain, body.dkim_domain or ""),
        dkim_selector=select_dkim_value(personalization.dkim_selector, body.dkim_selector or ""),
        dkim_private_key=select_dkim_value(personalization.dkim_private_key, body.dkim_private_key or ""),
    )


def apply_dkim_defaults(request: SendRequest, defaults: DkimConfig) -> SendRequest:
    """Return a copy of *request* with every DKIM field resolved.

    Args:
        request: Outbound message, possibly carrying body-level and
            per-personalization DKIM overrides.
        defaults: Client-level DKIM triple used where no override is given.

    Returns:
        New request whose body triple and every personalization triple are
        populated. Applying the merge again yields an equal request.

    Example:
        >>> from mailchannels_client.domain.models import EmailAddress
        >>> request = SendRequest(
        ...     personalizations=(
        ...         Personalization(to=(EmailAddress("a@example.com"),)),
        ...         Personalization(to=(EmailAddress("b@example.com"),), dkim_selector=" special "),
        ...     ),
        ...     from_=EmailAddress("sender@example.com"),
        ...     content=(),
        ...     dkim_domain="body.example.com",
        ... )
        >>> merged = apply_dkim_defaults(request, DkimConfig("example.com", "mc", "key"))
        >>> merged.dkim_domain, merged.dkim_selector
        ('body.example.com', 'mc')
        >>> [(p.dkim_domain, p.dkim_selector) for p in merged.personalizations]
        [('body.example.com', 'mc'), ('body.example.com', 'special')]
    """
    body = replace(
        request,
        dkim_domain=select_dkim_value(request.dkim_domain, defaults.domain),
        dkim_selector=select_dkim_value(request.dkim_selector, defaults.selector),
        dkim_private_key=select_dkim_value(request.dkim_private_key, defaults.private_key),
    )
    return replace(
        body,
        personalizations=tuple(_merge_personalization(item, body) for item in body.personalizations),
    )


__all__ = [
    "apply_dkim_defaults",
    "has_text",
    "select_dkim_value",
]
