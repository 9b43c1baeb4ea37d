"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


class ConfigurationError(ValueError):
    """Missing, invalid, or incomplete client configuration.

    Raised while constructing a client when credentials, DKIM defaults, or
    the transport are unusable. Never retried: a client that fails
    construction is never handed out.

    Example:
        >>> from mailchannels_client.domain.errors import ConfigurationError
        >>> err = ConfigurationError("api_key must be a non-empty string.")
        >>> str(err)
        'api_key must be a non-empty string.'
    """


class PayloadValidationError(ValueError):
    """Structural problem in an outbound message detected before any request.

    The message always names the offending field path, for example
    ``personalizations[0].to[1].email`` or ``request body.dkim_domain``.

    Example:
        >>> from mailchannels_client.domain.errors import PayloadValidationError
        >>> err = PayloadValidationError("reply_to.email must be a non-empty string.")
        >>> isinstance(err, ValueError)
        True
    """


class MailChannelsError(Exception):
    """The API answered with a non-success status.

    Carries enough HTTP metadata (status, request id, retry hint, header
    snapshot and the parsed or raw body) for callers to decide on a retry
    policy. The header snapshot is read-only.

    Args:
        message: Human-readable description of the failure.
        status: HTTP status code returned by the service.
        status_text: Optional reason phrase supplied by the upstream response.
        request_id: Correlation id surfaced from the response headers.
        retry_after_seconds: Parsed ``Retry-After`` window, when usable.
        headers: Response headers keyed by lower-case names.
        details: Parsed JSON payload or raw response text.
        cause: Optional underlying exception, chained as ``__cause__``.

    Example:
        >>> err = MailChannelsError(
        ...     "slow down",
        ...     status=429,
        ...     retry_after_seconds=30,
        ...     headers={"retry-after": "30"},
        ... )
        >>> err.status, err.retry_after_seconds
        (429, 30)
        >>> err.headers["retry-after"]
        '30'
    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        status_text: str | None = None,
        request_id: str | None = None,
        retry_after_seconds: int | None = None,
        headers: Mapping[str, str] | None = None,
        details: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.status_text = status_text
        self.request_id = request_id
        self.retry_after_seconds = retry_after_seconds
        self.headers: Mapping[str, str] = MappingProxyType(dict(headers or {}))
        self.details = details
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        """Underlying exception preserved when the error wraps lower-level code."""
        return self.__cause__

    def __repr__(self) -> str:
        return f"MailChannelsError({self.message!r}, status={self.status!r}, request_id={self.request_id!r})"


__all__ = [
    "ConfigurationError",
    "MailChannelsError",
    "PayloadValidationError",
]
