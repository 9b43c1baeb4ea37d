"""DKIM-aware client for the MailChannels ``send`` endpoint.

Each call runs merge -> validate -> build request -> transport -> normalize.
Everything before the transport call is synchronous; a payload that fails
validation never reaches the transport. The client holds only immutable
configuration, so concurrent ``send`` calls on one instance are safe.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, cast

import httpx
import orjson

from mailchannels_client.application.ports import Transport, TransportRequest
from mailchannels_client.domain.dkim import apply_dkim_defaults, has_text
from mailchannels_client.domain.errors import ConfigurationError, MailChannelsError
from mailchannels_client.domain.models import DkimConfig, SendRequest, SendResult
from mailchannels_client.domain.validation import validate_send_request

from .config import DEFAULT_BASE_URL
from .response import interpret_response
from .transport import HttpxTransport

if TYPE_CHECKING:
    from .config import ClientSettings

logger = logging.getLogger(__name__)

SEND_PATH = "send"
API_KEY_HEADER = "X-Api-Key"
IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"


def normalize_base_url(base_url: str | None) -> str:
    """Return the base URL with exactly one trailing slash.

    Example:
        >>> normalize_base_url("https://example.com/api")
        'https://example.com/api/'
        >>> normalize_base_url(" https://example.com/api// ")
        'https://example.com/api/'
        >>> normalize_base_url(None)
        'https://api.mailchannels.net/tx/v1/'
    """
    candidate = base_url if has_text(base_url) else DEFAULT_BASE_URL
    return cast(str, candidate).strip().rstrip("/") + "/"


def _resolve_dkim(dkim: DkimConfig | Mapping[str, Any] | None) -> DkimConfig:
    """Validate and trim the client-level DKIM defaults.

    Raises:
        ConfigurationError: When the configuration is absent or any field is blank.
    """
    if isinstance(dkim, Mapping):
        dkim = DkimConfig.from_mapping(cast(Mapping[str, Any], dkim))
    if not isinstance(dkim, DkimConfig):
        raise ConfigurationError("`dkim` configuration is required when constructing MailChannelsClient.")
    if not has_text(dkim.domain):
        raise ConfigurationError("`dkim.domain` must be a non-empty string.")
    if not has_text(dkim.selector):
        raise ConfigurationError("`dkim.selector` must be a non-empty string.")
    if not has_text(dkim.private_key):
        raise ConfigurationError("`dkim.private_key` must be a non-empty string containing the Base64-encoded key.")
    return dkim.trimmed()


class MailChannelsClient:
    """High-level interface to the MailChannels ``send`` endpoint.

    Args:
        api_key: API key with the ``api`` scope.
        dkim: Default DKIM credentials applied to every message, as a
            :class:`DkimConfig` or a mapping with ``domain``, ``selector``
            and ``private_key``.
        base_url: Transactional API base URL. Defaults to production.
        transport: Async callable used to issue the request. Defaults to
            :class:`HttpxTransport`.
        default_headers: Headers added to every request.

    Raises:
        ConfigurationError: When the API key or any DKIM field is blank, or
            the transport is not callable.

    Example:
        >>> client = MailChannelsClient(
        ...     api_key="key",
        ...     dkim={"domain": " example.com ", "selector": "mc", "private_key": "a2V5"},
        ...     base_url="https://example.com/api",
        ... )
        >>> client.base_url
        'https://example.com/api/'
        >>> client.dkim.domain
        'example.com'
    """

    __slots__ = ("_api_key", "_base_url", "_default_headers", "_dkim", "_transport")

    def __init__(
        self,
        *,
        api_key: str,
        dkim: DkimConfig | Mapping[str, Any] | None,
        base_url: str | None = None,
        transport: Transport | None = None,
        default_headers: Mapping[str, str] | None = None,
    ) -> None:
        if not has_text(api_key):
            raise ConfigurationError("`api_key` must be a non-empty string.")
        resolved_dkim = _resolve_dkim(dkim)
        resolved_transport: Any = transport if transport is not None else HttpxTransport()
        if not callable(resolved_transport):
            raise ConfigurationError(
                "No transport implementation available. Provide an async callable via `transport`."
            )

        self._api_key = api_key.strip()
        self._dkim = resolved_dkim
        self._base_url = normalize_base_url(base_url)
        self._transport: Transport = resolved_transport
        self._default_headers: Mapping[str, str] = MappingProxyType(dict(default_headers or {}))

    @classmethod
    def from_settings(cls, settings: ClientSettings | None, *, transport: Transport | None = None) -> MailChannelsClient:
        """Build a client from loaded :class:`ClientSettings`.

        When *transport* is omitted an :class:`HttpxTransport` honouring the
        configured timeout is used.

        Raises:
            ConfigurationError: When *settings* is missing or incomplete.
        """
        if settings is None:
            raise ConfigurationError("`settings` is required when constructing MailChannelsClient.")
        return cls(
            api_key=cast(str, settings.api_key),
            dkim=DkimConfig(
                domain=cast(str, settings.dkim_domain),
                selector=cast(str, settings.dkim_selector),
                private_key=cast(str, settings.dkim_private_key),
            ),
            base_url=settings.base_url,
            transport=transport if transport is not None else HttpxTransport(timeout=settings.timeout),
            default_headers=settings.default_headers,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def dkim(self) -> DkimConfig:
        return self._dkim

    @property
    def default_headers(self) -> Mapping[str, str]:
        return self._default_headers

    def __repr__(self) -> str:
        return f"MailChannelsClient(base_url={self._base_url!r}, dkim_domain={self._dkim.domain!r})"

    def prepare(self, payload: SendRequest | Mapping[str, Any]) -> SendRequest:
        """Merge DKIM defaults into *payload* and validate the result.

        Raises:
            PayloadValidationError: When the merged payload is malformed.
        """
        request = SendRequest.from_mapping(payload)
        merged = apply_dkim_defaults(request, self._dkim)
        validate_send_request(merged)
        return merged

    def build_url(self, *, dry_run: bool = False) -> str:
        """Return the send endpoint URL.

        Example:
            >>> client = MailChannelsClient(
            ...     api_key="key", dkim={"domain": "d", "selector": "s", "private_key": "k"}
            ... )
            >>> client.build_url(dry_run=True)
            'https://api.mailchannels.net/tx/v1/send?dry-run=true'
        """
        url = httpx.URL(self._base_url).join(SEND_PATH)
        if dry_run:
            url = url.copy_set_param("dry-run", "true")
        return str(url)

    def build_headers(self, *, idempotency_key: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = {
            "content-type": "application/json",
            API_KEY_HEADER: self._api_key,
            **self._default_headers,
        }
        if idempotency_key:
            headers[IDEMPOTENCY_KEY_HEADER] = idempotency_key
        return headers

    async def send(
        self,
        payload: SendRequest | Mapping[str, Any],
        *,
        dry_run: bool = False,
        signal: asyncio.Event | None = None,
        idempotency_key: str | None = None,
    ) -> SendResult:
        """Send a message through the ``send`` endpoint.

        Args:
            payload: Message as a :class:`SendRequest` or a JSON-like mapping.
                DKIM fields are filled from the client defaults unless overridden.
            dry_run: Ask the API to validate without delivering.
            signal: Cancellation event passed through to the transport.
            idempotency_key: Sent as the ``Idempotency-Key`` header when given.

        Returns:
            Status, message id and any additional response data.

        Raises:
            PayloadValidationError: Before any request when the payload is malformed.
            MailChannelsError: When the API responds with a non-success status.
        """
        request = self.prepare(payload)
        url = self.build_url(dry_run=dry_run)
        transport_request = TransportRequest(
            method="POST",
            headers=self.build_headers(idempotency_key=idempotency_key),
            body=orjson.dumps(request.to_payload()).decode("utf-8"),
            signal=signal,
        )

        logger.info(
            "Sending message",
            extra={
                "personalizations": len(request.personalizations),
                "dry_run": dry_run,
                "has_idempotency_key": bool(idempotency_key),
            },
        )

        response = await self._transport(url, transport_request)
        raw_text = await response.text()

        try:
            result = interpret_response(response.status, response.status_text, response.headers, raw_text)
        except MailChannelsError as exc:
            logger.warning(
                "MailChannels API rejected message",
                extra={
                    "status": exc.status,
                    "request_id": exc.request_id,
                    "retry_after_seconds": exc.retry_after_seconds,
                },
            )
            raise

        logger.info("Message accepted", extra={"status": result.status, "message_id": result.id})
        return result

    def send_sync(
        self,
        payload: SendRequest | Mapping[str, Any],
        *,
        dry_run: bool = False,
        idempotency_key: str | None = None,
    ) -> SendResult:
        """Blocking variant of :meth:`send` for callers without an event loop."""
        return asyncio.run(self.send(payload, dry_run=dry_run, idempotency_key=idempotency_key))


def create_client(settings: ClientSettings) -> MailChannelsClient:
    """Build a production client from settings."""
    return MailChannelsClient.from_settings(settings)


__all__ = [
    "API_KEY_HEADER",
    "IDEMPOTENCY_KEY_HEADER",
    "MailChannelsClient",
    "SEND_PATH",
    "create_client",
    "normalize_base_url",
]
