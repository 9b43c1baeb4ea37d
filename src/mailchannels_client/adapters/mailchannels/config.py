"""Client settings model and loader.

Provides the ClientSettings Pydantic model for validated, immutable client
settings and the loader function to create it from configuration
dictionaries produced by lib_layered_config.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .transport import DEFAULT_TIMEOUT_SECONDS

DEFAULT_BASE_URL = "https://api.mailchannels.net/tx/v1"

_SECRET_FIELDS = frozenset({"api_key", "dkim_private_key"})


class ClientSettings(BaseModel):
    """Validated, immutable client settings.

    Blank credentials are kept as ``None`` so the client can report exactly
    which one is missing when it is constructed.

    Example:
        >>> settings = ClientSettings(api_key="key", dkim_domain="example.com")
        >>> settings.base_url
        'https://api.mailchannels.net/tx/v1'
        >>> settings.dkim_selector is None
        True
    """

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    dkim_domain: str | None = None
    dkim_selector: str | None = None
    dkim_private_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    default_headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @field_validator("api_key", "dkim_domain", "dkim_selector", "dkim_private_key", mode="before")
    @classmethod
    def _coerce_empty_string_to_none(cls, v: str | None) -> str | None:
        """Coerce empty or whitespace-only strings to None.

        Treats empty strings from config files as "not configured" rather
        than explicit empty values.
        """
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("base_url", mode="before")
    @classmethod
    def _default_blank_base_url(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_BASE_URL
        return v

    @field_validator("default_headers", mode="before")
    @classmethod
    def _coerce_headers(cls, v: Any) -> dict[str, str]:
        """Accept a missing section as no headers; stringify values.

        Examples:
            >>> ClientSettings._coerce_headers(None)
            {}
            >>> ClientSettings._coerce_headers({"X-Env": 1})
            {'X-Env': '1'}
        """
        if v is None:
            return {}
        if isinstance(v, Mapping):
            return {str(key): str(value) for key, value in cast(Mapping[Any, Any], v).items()}
        return v

    @model_validator(mode="after")
    def _validate_settings(self) -> ClientSettings:
        """Reject non-positive timeouts.

        Raises:
            ValueError: When the timeout is zero or negative.
        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        return self

    def __repr__(self) -> str:
        """Return string representation with secrets redacted.

        Example:
            >>> settings = ClientSettings(api_key="secret123")
            >>> "secret123" in repr(settings)
            False
            >>> "[REDACTED]" in repr(settings)
            True
        """
        fields: list[str] = []
        for name, value in self:
            if name in _SECRET_FIELDS and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"ClientSettings({', '.join(fields)})"


def load_client_settings_from_dict(config_dict: Mapping[str, Any]) -> ClientSettings:
    """Load ClientSettings from a configuration dictionary.

    Handles the nested ``[mailchannels.dkim]`` TOML section by flattening it
    with a ``dkim_`` prefix to match ClientSettings field names.

    Args:
        config_dict: Configuration dictionary typically from lib_layered_config.
            Expected to have a 'mailchannels' section.

    Returns:
        Client settings with defaults for missing values.

    Example:
        >>> settings = load_client_settings_from_dict(
        ...     {
        ...         "mailchannels": {
        ...             "api_key": "key",
        ...             "dkim": {"domain": "example.com", "selector": "mc", "private_key": "a2V5"},
        ...         }
        ...     }
        ... )
        >>> settings.dkim_domain, settings.dkim_selector
        ('example.com', 'mc')
    """
    section: Any = config_dict.get("mailchannels", {})

    if not isinstance(section, Mapping):
        return ClientSettings.model_validate(section)

    raw: dict[str, Any] = dict(cast(Mapping[str, Any], section))

    dkim_raw: Any = raw.pop("dkim", {})
    if isinstance(dkim_raw, Mapping):
        for key, value in cast(Mapping[str, Any], dkim_raw).items():
            raw[f"dkim_{key}"] = value

    return ClientSettings.model_validate(raw)


__all__ = [
    "DEFAULT_BASE_URL",
    "ClientSettings",
    "load_client_settings_from_dict",
]
