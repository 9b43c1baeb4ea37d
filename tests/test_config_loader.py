"""Layered configuration loading: bundled defaults, profiles, environment overrides."""

from __future__ import annotations

from typing import Any

import pytest
import rtoml

from mailchannels_client.adapters.config import get_config, get_default_config_path
from mailchannels_client.adapters.config.loader import validate_profile
from mailchannels_client.adapters.mailchannels import ClientSettings, load_client_settings_from_dict
from mailchannels_client.adapters.mailchannels.config import DEFAULT_BASE_URL


def _load_defaults() -> dict[str, Any]:
    return rtoml.load(get_default_config_path())


@pytest.mark.os_agnostic
def test_default_config_file_ships_with_the_package() -> None:
    assert get_default_config_path().is_file()


@pytest.mark.os_agnostic
def test_default_config_declares_production_base_url() -> None:
    defaults = _load_defaults()

    assert defaults["mailchannels"]["base_url"] == DEFAULT_BASE_URL
    assert defaults["mailchannels"]["api_key"] == ""


@pytest.mark.os_agnostic
def test_default_config_loads_into_unconfigured_settings() -> None:
    """Blank credentials from the defaults stay unset rather than empty."""
    settings = load_client_settings_from_dict(_load_defaults())

    assert isinstance(settings, ClientSettings)
    assert settings.api_key is None
    assert settings.dkim_domain is None
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.default_headers == {}


@pytest.mark.os_agnostic
@pytest.mark.parametrize("profile", ["production", "test", "staging-eu"])
def test_valid_profile_names_are_accepted(profile: str) -> None:
    validate_profile(profile)


@pytest.mark.os_agnostic
@pytest.mark.parametrize("profile", ["../etc/passwd", "a/b"])
def test_invalid_profile_names_are_rejected(profile: str) -> None:
    with pytest.raises(ValueError):
        validate_profile(profile)


@pytest.mark.os_agnostic
def test_get_config_rejects_invalid_profile(clear_config_cache: None) -> None:
    with pytest.raises(ValueError):
        get_config(profile="../escape")


@pytest.mark.os_agnostic
def test_get_config_includes_bundled_defaults(clear_config_cache: None) -> None:
    config = get_config()

    assert config.as_dict()["mailchannels"]["base_url"] == DEFAULT_BASE_URL


@pytest.mark.os_agnostic
def test_api_key_from_env_var(clear_config_cache: None, monkeypatch: pytest.MonkeyPatch) -> None:
    """MAILCHANNELS_CLIENT___MAILCHANNELS__API_KEY flows into mailchannels.api_key."""
    monkeypatch.setenv("MAILCHANNELS_CLIENT___MAILCHANNELS__API_KEY", "from-env")

    config = get_config()

    assert config.as_dict()["mailchannels"]["api_key"] == "from-env"


@pytest.mark.os_agnostic
def test_nested_dkim_domain_from_env_var(clear_config_cache: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAILCHANNELS_CLIENT___MAILCHANNELS__DKIM__DOMAIN", "env.example.com")

    settings = load_client_settings_from_dict(get_config().as_dict())

    assert settings.dkim_domain == "env.example.com"


@pytest.mark.os_agnostic
def test_get_config_is_cached_until_cleared(clear_config_cache: None) -> None:
    first = get_config()

    assert get_config() is first

    get_config.cache_clear()
    assert get_config() is not first
