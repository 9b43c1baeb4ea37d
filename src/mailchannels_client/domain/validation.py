"""Structural validation of outbound messages.

Checks run in a fixed order and the first failure wins. Every error message
starts with the exact path of the offending field, e.g.
``personalizations[0].cc[2].email`` or ``request body.dkim_selector``.
Validation is expected to run on a DKIM-merged request, so the DKIM checks
re-verify the merge output.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .dkim import has_text
from .errors import PayloadValidationError
from .models import Attachment, ContentBlock, EmailAddress, Personalization, SendRequest

_DKIM_FIELDS = ("dkim_domain", "dkim_selector", "dkim_private_key")


def validate_email_address(address: EmailAddress | None, path: str) -> None:
    """Ensure *address* carries a non-blank email.

    Raises:
        PayloadValidationError: When the address or its email is missing or blank.

    Example:
        >>> validate_email_address(EmailAddress("a@example.com"), "from")
        >>> validate_email_address(EmailAddress(""), "reply_to")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        PayloadValidationError: reply_to.email must be a non-empty string.
    """
    if address is None or not has_text(address.email):
        raise PayloadValidationError(f"{path}.email must be a non-empty string.")


def _validate_addresses(addresses: Iterable[EmailAddress] | None, path: str) -> None:
    for index, address in enumerate(addresses or ()):
        validate_email_address(address, f"{path}[{index}]")


def validate_personalization(personalization: Personalization, index: int) -> None:
    """Ensure a recipient group has at least one ``to`` and valid addresses."""
    path = f"personalizations[{index}]"
    if not personalization.to:
        raise PayloadValidationError(f"{path}.to must contain at least one recipient.")
    _validate_addresses(personalization.to, f"{path}.to")
    _validate_addresses(personalization.cc, f"{path}.cc")
    _validate_addresses(personalization.bcc, f"{path}.bcc")


def validate_content_block(block: ContentBlock, index: int) -> None:
    if not has_text(block.type):
        raise PayloadValidationError(f"content[{index}].type must be a non-empty string.")
    if not isinstance(block.value, str):
        raise PayloadValidationError(f"content[{index}].value must be a string.")


def validate_attachment(attachment: Attachment, index: int) -> None:
    if not has_text(attachment.type):
        raise PayloadValidationError(f"attachments[{index}].type must be a non-empty string.")
    if not has_text(attachment.filename):
        raise PayloadValidationError(f"attachments[{index}].filename must be a non-empty string.")
    if not has_text(attachment.content):
        raise PayloadValidationError(f"attachments[{index}].content must be a base64 string.")


def validate_dkim_fields(fields: Any, path: str) -> None:
    """Ensure the DKIM triple on *fields* is fully populated."""
    for name in _DKIM_FIELDS:
        if not has_text(getattr(fields, name, None)):
            raise PayloadValidationError(f"{path}.{name} must be a non-empty string.")


def validate_send_request(request: SendRequest) -> None:
    """Run all structural checks over a DKIM-merged request.

    Args:
        request: Request produced by
            :func:`mailchannels_client.domain.dkim.apply_dkim_defaults`.

    Raises:
        PayloadValidationError: On the first structural problem found.
    """
    if not request.personalizations:
        raise PayloadValidationError("`personalizations` must contain at least one recipient block.")

    for index, personalization in enumerate(request.personalizations):
        validate_personalization(personalization, index)

    validate_email_address(request.from_, "from")

    if request.reply_to is not None:
        validate_email_address(request.reply_to, "reply_to")

    if not request.content:
        raise PayloadValidationError("`content` must include at least one content block.")

    for index, block in enumerate(request.content):
        validate_content_block(block, index)

    for index, attachment in enumerate(request.attachments or ()):
        validate_attachment(attachment, index)

    validate_dkim_fields(request, "request body")

    for index, personalization in enumerate(request.personalizations):
        validate_dkim_fields(personalization, f"personalizations[{index}]")


__all__ = [
    "validate_attachment",
    "validate_content_block",
    "validate_dkim_fields",
    "validate_email_address",
    "validate_personalization",
    "validate_send_request",
]
