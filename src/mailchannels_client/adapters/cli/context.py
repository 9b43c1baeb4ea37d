"""Per-invocation CLI state shared between the root group and subcommands.

The root group loads configuration once and stores a :class:`CLIContext`
on the Click context. Subcommands read it back and ask it for client
settings or a ready client instead of reaching into the services directly.
Traceback flags live in ``lib_cli_exit_tools.config`` and are captured as a
:class:`TracebackState` so ``main`` can put them back afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

import lib_cli_exit_tools
import rich_click as click
from lib_layered_config import Config

if TYPE_CHECKING:
    from mailchannels_client.adapters.mailchannels import ClientSettings, MailChannelsClient
    from mailchannels_client.composition import AppServices


class TracebackState(NamedTuple):
    """Captured ``lib_cli_exit_tools`` traceback flags."""

    enabled: bool
    force_color: bool


@dataclass(slots=True)
class CLIContext:
    """Configuration and services for one CLI invocation."""

    traceback: bool
    config: Config
    services: AppServices
    profile: str | None = None

    def client_settings(self) -> ClientSettings:
        """Read the ``[mailchannels]`` section into validated settings.

        Raises:
            pydantic.ValidationError: When the section holds invalid values.
        """
        return self.services.load_client_settings(self.config.as_dict())

    def create_client(self) -> MailChannelsClient:
        """Build a client from the configured settings.

        Raises:
            ConfigurationError: When credentials or DKIM defaults are missing.
            pydantic.ValidationError: When the section holds invalid values.
        """
        return self.services.create_client(self.client_settings())


def store_cli_context(
    ctx: click.Context,
    *,
    traceback: bool,
    config: Config,
    services: AppServices,
    profile: str | None = None,
) -> CLIContext:
    """Attach a fresh :class:`CLIContext` to *ctx* and return it.

    Example:
        >>> from unittest.mock import MagicMock
        >>> ctx = MagicMock()
        >>> store_cli_context(ctx, traceback=True, config=MagicMock(), services=MagicMock(), profile="test").profile
        'test'
    """
    cli_ctx = CLIContext(traceback=traceback, config=config, services=services, profile=profile)
    ctx.obj = cli_ctx
    return cli_ctx


def get_cli_context(ctx: click.Context) -> CLIContext:
    """Return the :class:`CLIContext` stored by the root group.

    Raises:
        RuntimeError: When a subcommand runs without the root group.
    """
    cli_ctx = ctx.obj
    if isinstance(cli_ctx, CLIContext):
        return cli_ctx
    raise RuntimeError("CLI context not initialized. Call store_cli_context first.")


def apply_traceback_preferences(enabled: bool) -> None:
    """Turn full tracebacks (and their colouring) on or off.

    Example:
        >>> apply_traceback_preferences(True)
        >>> bool(lib_cli_exit_tools.config.traceback)
        True
    """
    lib_cli_exit_tools.config.traceback = bool(enabled)
    lib_cli_exit_tools.config.traceback_force_color = bool(enabled)


def snapshot_traceback_state() -> TracebackState:
    return TracebackState(
        enabled=bool(getattr(lib_cli_exit_tools.config, "traceback", False)),
        force_color=bool(getattr(lib_cli_exit_tools.config, "traceback_force_color", False)),
    )


def restore_traceback_state(state: TracebackState) -> None:
    """Put back flags captured by :func:`snapshot_traceback_state`.

    Example:
        >>> original = snapshot_traceback_state()
        >>> apply_traceback_preferences(not original.enabled)
        >>> restore_traceback_state(original)
        >>> snapshot_traceback_state() == original
        True
    """
    lib_cli_exit_tools.config.traceback = state.enabled
    lib_cli_exit_tools.config.traceback_force_color = state.force_color


__all__ = [
    "CLIContext",
    "TracebackState",
    "apply_traceback_preferences",
    "get_cli_context",
    "restore_traceback_state",
    "snapshot_traceback_state",
    "store_cli_context",
]
