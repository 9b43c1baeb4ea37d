"""Shared pytest fixtures for client, CLI and module-entry tests.

All shared fixtures live here and read as plain English. Network access is
replaced by :class:`RecordingTransport` from the in-memory adapters, never
by patching httpx.
"""

from __future__ import annotations

import contextlib
import os
import re
import tempfile
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from mailchannels_client.adapters.mailchannels import MailChannelsClient
from mailchannels_client.adapters.memory import RecordingTransport, StaticResponse
from mailchannels_client.composition import AppServices, build_testing

_COVERAGE_BASENAME = ".coverage.mailchannels_client"


def _purge_stale_coverage_files(cov_path: Path) -> None:
    """Delete leftover SQLite database and journal files from crashed runs."""
    for suffix in ("", "-journal", "-wal", "-shm"):
        with contextlib.suppress(FileNotFoundError):
            Path(str(cov_path) + suffix).unlink()


def pytest_configure(config: pytest.Config) -> None:
    """Redirect the coverage database to a local temp directory.

    Runs before ``pytest-cov`` creates its ``Coverage()`` object so the
    ``COVERAGE_FILE`` value is picked up however pytest is invoked.
    """
    if "COVERAGE_FILE" not in os.environ:
        cov_path = Path(tempfile.gettempdir()) / _COVERAGE_BASENAME
        _purge_stale_coverage_files(cov_path)
        os.environ["COVERAGE_FILE"] = str(cov_path)


ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))

API_KEY = "api-key"

#: Client DKIM defaults, padded to prove trimming happens.
DKIM_DEFAULTS: dict[str, str] = {
    "domain": " example.com ",
    "selector": " default-selector ",
    "private_key": " default-private-key ",
}


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test."""
    return CliRunner()


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache around each test."""
    from mailchannels_client.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield
    config_mod.get_config.cache_clear()


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts without filesystem I/O."""

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def recording_transport() -> RecordingTransport:
    """Provide a transport that records calls and answers ``200`` with no body."""
    return RecordingTransport()


@pytest.fixture
def client_factory(recording_transport: RecordingTransport) -> Callable[..., MailChannelsClient]:
    """Return a builder for clients wired to ``recording_transport``.

    Keyword arguments override the constructor defaults.

    Example:
        def test_base_url(client_factory: Callable[..., MailChannelsClient]) -> None:
            client = client_factory(base_url="https://example.com/api")
            assert client.base_url == "https://example.com/api/"
    """

    def _create(**overrides: Any) -> MailChannelsClient:
        options: dict[str, Any] = {
            "api_key": API_KEY,
            "dkim": dict(DKIM_DEFAULTS),
            "transport": recording_transport,
        }
        options.update(overrides)
        return MailChannelsClient(**options)

    return _create


@pytest.fixture
def respond_with(recording_transport: RecordingTransport) -> Callable[[StaticResponse], RecordingTransport]:
    """Queue a canned response on ``recording_transport``."""

    def _respond(response: StaticResponse) -> RecordingTransport:
        return recording_transport.queue(response)

    return _respond


def build_payload() -> dict[str, Any]:
    """Return a fresh, valid two-personalization message.

    The second personalization carries padded DKIM overrides.
    """
    return {
        "personalizations": [
            {
                "to": [{"email": "primary@example.com", "name": "Primary"}],
                "cc": [{"email": "copy@example.com"}],
                "bcc": [{"email": "hidden@example.com"}],
            },
            {
                "to": [{"email": "override@example.com"}],
                "dkim_domain": " override.example.com ",
                "dkim_selector": " override-selector ",
                "dkim_private_key": " override-private-key ",
            },
        ],
        "from": {"email": "sender@example.com", "name": "Sender"},
        "reply_to": {"email": "reply@example.com"},
        "subject": "Test message",
        "content": [
            {"type": "text/plain", "value": "Plain content"},
            {"type": "text/html", "value": "<p>HTML content</p>"},
        ],
        "attachments": [
            {"type": "text/plain", "filename": "note.txt", "content": "ZmlsZS1jb250ZW50"},
        ],
    }


@pytest.fixture
def payload() -> dict[str, Any]:
    """Provide a fresh, valid message payload per test."""
    return build_payload()


@dataclass
class SendCliContext:
    """Container for send CLI test setup.

    Attributes:
        factory: Callable that returns wired AppServices for CLI invocation.
        transport: RecordingTransport capturing every request the CLI issues.
    """

    factory: Callable[[], AppServices]
    transport: RecordingTransport


@pytest.fixture
def send_cli_context(clear_config_cache: None) -> Callable[[dict[str, Any]], SendCliContext]:
    """Create send CLI test context from ``[mailchannels]`` section contents.

    Example:
        def test_send(cli_runner, send_cli_context) -> None:
            ctx = send_cli_context({"api_key": "k", "dkim": {...}})
            result = cli_runner.invoke(cli, ["send", "payload.json"], obj=ctx.factory)
            assert ctx.transport.calls
    """

    def _create(section: dict[str, Any]) -> SendCliContext:
        transport = RecordingTransport()
        services = build_testing(transport=transport, config={"mailchannels": section})
        return SendCliContext(factory=lambda: services, transport=transport)

    return _create


@pytest.fixture
def configured_section() -> dict[str, Any]:
    """Provide a complete ``[mailchannels]`` configuration section."""
    return {
        "api_key": API_KEY,
        "base_url": "https://api.example.test/tx/v1",
        "dkim": {"domain": "example.com", "selector": "mc", "private_key": "a2V5"},
    }
