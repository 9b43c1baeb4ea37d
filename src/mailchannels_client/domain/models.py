"""Value types describing an outbound message and its send result.

Every type is an immutable frozen dataclass. Payloads arriving as plain
mappings (parsed JSON, literal dicts) are converted with the lenient
``from_mapping`` constructors, which never raise on structural problems:
wrong shapes are carried through so that
:func:`mailchannels_client.domain.validation.validate_send_request` can
report them with an exact field path.

Keys the client does not model are preserved in an ``extra`` side-map and
re-emitted verbatim by ``to_payload``.

Contents:
    * :class:`EmailAddress`, :class:`Personalization`, :class:`ContentBlock`,
      :class:`Attachment`, :class:`SendRequest` - request payload.
    * :class:`DkimConfig` - client-level DKIM defaults.
    * :class:`SendResult` - success envelope.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, cast

from .errors import PayloadValidationError

_PERSONALIZATION_KEYS = frozenset(
    {
        "to",
        "cc",
        "bcc",
        "subject",
        "headers",
        "dynamic_template_data",
        "dkim_domain",
        "dkim_selector",
        "dkim_private_key",
    }
)

_ADDRESS_KEYS = frozenset({"email", "name"})
_CONTENT_KEYS = frozenset({"type", "value"})
_ATTACHMENT_KEYS = frozenset({"type", "filename", "content"})

_REQUEST_KEYS = frozenset(
    {
        "personalizations",
        "from",
        "reply_to",
        "subject",
        "content",
        "attachments",
        "headers",
        "dkim_domain",
        "dkim_selector",
        "dkim_private_key",
    }
)


def _empty_extra() -> dict[str, Any]:
    """Create an empty typed mapping for unmodelled keys."""
    return {}


def _as_mapping(value: Any) -> Mapping[str, Any]:
    """Return *value* when it is a mapping, else an empty one."""
    if isinstance(value, Mapping):
        return cast(Mapping[str, Any], value)
    return {}


def _as_items(value: Any) -> list[Any]:
    """Return list items of *value*; strings and non-sequences yield nothing."""
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return list(cast(Sequence[Any], value))
    return []


def _extra_keys(data: Mapping[str, Any], known: frozenset[str]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key not in known}


def _is_unset(value: Any) -> bool:
    """Return True for ``None`` and empty scalars such as ``""``, ``0`` or ``False``.

    Example:
        >>> _is_unset(""), _is_unset({}), _is_unset({"email": "a@example.com"})
        (True, False, False)
    """
    return value is None or (isinstance(value, (str, int, float)) and not value)


def _put(target: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


@dataclass(frozen=True, slots=True)
class EmailAddress:
    """A single address with an optional display name.

    Example:
        >>> EmailAddress.from_mapping({"email": "sender@example.com", "name": "Sender"}).to_payload()
        {'email': 'sender@example.com', 'name': 'Sender'}
    """

    email: str
    name: str | None = None
    extra: Mapping[str, Any] = field(default_factory=_empty_extra)

    @classmethod
    def from_mapping(cls, data: Any) -> EmailAddress:
        if isinstance(data, EmailAddress):
            return data
        raw = _as_mapping(data)
        return cls(email=raw.get("email", ""), name=raw.get("name"), extra=_extra_keys(raw, _ADDRESS_KEYS))

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload["email"] = self.email
        _put(payload, "name", self.name)
        return payload


def _addresses(value: Any) -> tuple[EmailAddress, ...]:
    return tuple(EmailAddress.from_mapping(item) for item in _as_items(value))


def _optional_addresses(value: Any) -> tuple[EmailAddress, ...] | None:
    if value is None:
        return None
    return _addresses(value)


@dataclass(frozen=True, slots=True)
class Personalization:
    """One recipient group with optional subject, header and DKIM overrides."""

    to: tuple[EmailAddress, ...]
    cc: tuple[EmailAddress, ...] | None = None
    bcc: tuple[EmailAddress, ...] | None = None
    subject: str | None = None
    headers: Mapping[str, str] | None = None
    dynamic_template_data: Mapping[str, Any] | None = None
    dkim_domain: str | None = None
    dkim_selector: str | None = None
    dkim_private_key: str | None = field(default=None, repr=False)
    extra: Mapping[str, Any] = field(default_factory=_empty_extra)

    @classmethod
    def from_mapping(cls, data: Any) -> Personalization:
        if isinstance(data, Personalization):
            return data
        raw = _as_mapping(data)
        return cls(
            to=_addresses(raw.get("to")),
            cc=_optional_addresses(raw.get("cc")),
            bcc=_optional_addresses(raw.get("bcc")),
            subject=raw.get("subject"),
            headers=raw.get("headers"),
            dynamic_template_data=raw.get("dynamic_template_data"),
            dkim_domain=raw.get("dkim_domain"),
            dkim_selector=raw.get("dkim_selector"),
            dkim_private_key=raw.get("dkim_private_key"),
            extra=_extra_keys(raw, _PERSONALIZATION_KEYS),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload["to"] = [address.to_payload() for address in self.to]
        if self.cc is not None:
            payload["cc"] = [address.to_payload() for address in self.cc]
        if self.bcc is not None:
            payload["bcc"] = [address.to_payload() for address in self.bcc]
        _put(payload, "subject", self.subject)
        _put(payload, "headers", None if self.headers is None else dict(self.headers))
        _put(
            payload,
            "dynamic_template_data",
            None if self.dynamic_template_data is None else dict(self.dynamic_template_data),
        )
        _put(payload, "dkim_domain", self.dkim_domain)
        _put(payload, "dkim_selector", self.dkim_selector)
        _put(payload, "dkim_private_key", self.dkim_private_key)
        return payload


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """Body part of a message, e.g. ``text/plain`` or ``text/html``."""

    type: str
    value: str
    extra: Mapping[str, Any] = field(default_factory=_empty_extra)

    @classmethod
    def from_mapping(cls, data: Any) -> ContentBlock:
        if isinstance(data, ContentBlock):
            return data
        raw = _as_mapping(data)
        return cls(
            type=raw.get("type", ""),
            value=raw.get("value"),  # type: ignore[arg-type]
            extra=_extra_keys(raw, _CONTENT_KEYS),
        )

    def to_payload(self) -> dict[str, Any]:
        return {**self.extra, "type": self.type, "value": self.value}


@dataclass(frozen=True, slots=True)
class Attachment:
    """File attachment; ``content`` holds the base64-encoded bytes."""

    type: str
    filename: str
    content: str = field(repr=False)
    extra: Mapping[str, Any] = field(default_factory=_empty_extra)

    @classmethod
    def from_mapping(cls, data: Any) -> Attachment:
        if isinstance(data, Attachment):
            return data
        raw = _as_mapping(data)
        return cls(
            type=raw.get("type", ""),
            filename=raw.get("filename", ""),
            content=raw.get("content", ""),
            extra=_extra_keys(raw, _ATTACHMENT_KEYS),
        )

    def to_payload(self) -> dict[str, Any]:
        return {**self.extra, "type": self.type, "filename": self.filename, "content": self.content}


@dataclass(frozen=True, slots=True)
class SendRequest:
    """Complete outbound message accepted by the ``send`` endpoint.

    The sender is stored as ``from_`` because ``from`` is a keyword; the wire
    key stays ``from``.

    Example:
        >>> request = SendRequest.from_mapping(
        ...     {
        ...         "personalizations": [{"to": [{"email": "to@example.com"}]}],
        ...         "from": {"email": "from@example.com"},
        ...         "content": [{"type": "text/plain", "value": "Hi"}],
        ...         "tracking_settings": {"click_tracking": {"enable": False}},
        ...     }
        ... )
        >>> request.from_.email
        'from@example.com'
        >>> request.extra["tracking_settings"]
        {'click_tracking': {'enable': False}}
    """

    personalizations: tuple[Personalization, ...]
    from_: EmailAddress
    content: tuple[ContentBlock, ...]
    reply_to: EmailAddress | None = None
    subject: str | None = None
    attachments: tuple[Attachment, ...] | None = None
    headers: Mapping[str, str] | None = None
    dkim_domain: str | None = None
    dkim_selector: str | None = None
    dkim_private_key: str | None = field(default=None, repr=False)
    extra: Mapping[str, Any] = field(default_factory=_empty_extra)

    @classmethod
    def from_mapping(cls, data: Any) -> SendRequest:
        """Build a request from a JSON-like mapping without validating it.

        Raises:
            PayloadValidationError: When *data* is not a mapping at all.
        """
        if isinstance(data, SendRequest):
            return data
        if not isinstance(data, Mapping):
            raise PayloadValidationError("`payload` must be a mapping or SendRequest.")
        raw = cast(Mapping[str, Any], data)
        reply_to = raw.get("reply_to")
        attachments = raw.get("attachments")
        extra = _extra_keys(raw, _REQUEST_KEYS)
        # An empty scalar reply_to means "no reply-to" and travels on the wire as given.
        if reply_to is not None and _is_unset(reply_to):
            extra["reply_to"] = reply_to
        return cls(
            personalizations=tuple(Personalization.from_mapping(item) for item in _as_items(raw.get("personalizations"))),
            from_=EmailAddress.from_mapping(raw.get("from")),
            content=tuple(ContentBlock.from_mapping(item) for item in _as_items(raw.get("content"))),
            reply_to=None if _is_unset(reply_to) else EmailAddress.from_mapping(reply_to),
            subject=raw.get("subject"),
            attachments=None
            if attachments is None
            else tuple(Attachment.from_mapping(item) for item in _as_items(attachments)),
            headers=raw.get("headers"),
            dkim_domain=raw.get("dkim_domain"),
            dkim_selector=raw.get("dkim_selector"),
            dkim_private_key=raw.get("dkim_private_key"),
            extra=extra,
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready wire representation, extras included."""
        payload: dict[str, Any] = dict(self.extra)
        payload["personalizations"] = [item.to_payload() for item in self.personalizations]
        payload["from"] = self.from_.to_payload()
        if self.reply_to is not None:
            payload["reply_to"] = self.reply_to.to_payload()
        _put(payload, "subject", self.subject)
        payload["content"] = [block.to_payload() for block in self.content]
        if self.attachments is not None:
            payload["attachments"] = [attachment.to_payload() for attachment in self.attachments]
        _put(payload, "headers", None if self.headers is None else dict(self.headers))
        _put(payload, "dkim_domain", self.dkim_domain)
        _put(payload, "dkim_selector", self.dkim_selector)
        _put(payload, "dkim_private_key", self.dkim_private_key)
        return payload


@dataclass(frozen=True, slots=True)
class DkimConfig:
    """Default DKIM signing credentials held by a client.

    Example:
        >>> DkimConfig.from_mapping({"domain": "example.com", "selector": "mc", "privateKey": "a2V5"}).private_key
        'a2V5'
    """

    domain: str
    selector: str
    private_key: str = field(repr=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DkimConfig:
        """Accept ``private_key`` or the camel-case ``privateKey`` spelling."""
        private_key = data.get("private_key", data.get("privateKey"))
        return cls(domain=data.get("domain"), selector=data.get("selector"), private_key=private_key)  # type: ignore[arg-type]

    def trimmed(self) -> DkimConfig:
        return DkimConfig(
            domain=self.domain.strip(),
            selector=self.selector.strip(),
            private_key=self.private_key.strip(),
        )


@dataclass(frozen=True, slots=True)
class SendResult:
    """Success envelope returned by :meth:`MailChannelsClient.send`.

    Example:
        >>> SendResult(status=202, id="x").to_dict()
        {'status': 202, 'id': 'x'}
    """

    status: int
    id: str | None = None
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status}
        _put(result, "id", self.id)
        _put(result, "data", self.data)
        return result


__all__ = [
    "Attachment",
    "ContentBlock",
    "DkimConfig",
    "EmailAddress",
    "Personalization",
    "SendRequest",
    "SendResult",
]
