"""Composition root wiring adapters to application ports."""

from __future__ import annotations

import functools
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

# Configuration services
from ..adapters.config.loader import get_config

# Logging services
from ..adapters.logging.setup import init_logging

# MailChannels services
from ..adapters.mailchannels import (
    MailChannelsClient,
    create_client,
    load_client_settings_from_dict,
)

# Static conformance assertions verified at type-check time.
if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.memory import RecordingTransport
    from ..application.ports import CreateClient, GetConfig, InitLogging, LoadClientSettings

    _assert_get_config: GetConfig = get_config
    _assert_init_logging: InitLogging = init_logging
    _assert_load_client_settings: LoadClientSettings = load_client_settings_from_dict
    _assert_create_client: CreateClient = create_client


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    init_logging: InitLogging
    load_client_settings: LoadClientSettings
    create_client: CreateClient


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        init_logging=init_logging,
        load_client_settings=load_client_settings_from_dict,
        create_client=create_client,
    )


def build_testing(
    *,
    transport: RecordingTransport | None = None,
    config: Mapping[str, Any] | None = None,
) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        transport: Optional RecordingTransport for capturing requests. When
            None, a fresh one answering ``200`` with an empty body is used.
        config: Optional configuration data returned by ``get_config``.
            Defaults to an empty configuration.

    Returns:
        AppServices container whose clients never touch the network.

    Example:
        >>> services = build_testing(config={"mailchannels": {"api_key": "key"}})
        >>> services.get_config().get("mailchannels.api_key")
        'key'
    """
    from ..adapters.memory import (
        RecordingTransport,
        config_from_mapping,
        get_config_in_memory,
        init_logging_in_memory,
    )

    spy = transport if transport is not None else RecordingTransport()

    def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
        if config is None:
            return get_config_in_memory(profile=profile, start_dir=start_dir)
        return config_from_mapping(config)

    return AppServices(
        get_config=_get_config,
        init_logging=init_logging_in_memory,
        load_client_settings=load_client_settings_from_dict,
        create_client=functools.partial(MailChannelsClient.from_settings, transport=spy),
    )


__all__ = [
    # Configuration
    "get_config",
    # Logging
    "init_logging",
    # MailChannels
    "create_client",
    "load_client_settings_from_dict",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
]
