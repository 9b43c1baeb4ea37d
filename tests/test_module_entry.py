"""Module entry stories ensuring `python -m` mirrors the CLI."""

from __future__ import annotations

import runpy
import sys

import pytest

from mailchannels_client import __init__conf__, entry
from mailchannels_client.adapters import cli as cli_mod


@pytest.mark.os_agnostic
def test_module_entry_executes_cli_and_shows_help(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    managed_traceback_state: None,
) -> None:
    """python -m invocation with no args shows help and exits 0."""
    monkeypatch.setattr(sys, "argv", ["mailchannels-client"], raising=False)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("mailchannels_client.__main__", run_name="__main__")

    captured = capsys.readouterr()
    assert exc.value.code == 0
    assert "Usage:" in captured.out
    assert __init__conf__.shell_command in captured.out


@pytest.mark.os_agnostic
def test_console_script_entry_reports_version(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    managed_traceback_state: None,
) -> None:
    monkeypatch.setattr(sys, "argv", ["mailchannels-client", "--version"], raising=False)

    exit_code = entry.main()

    assert exit_code == 0
    assert __init__conf__.version in capsys.readouterr().out


@pytest.mark.os_agnostic
def test_module_entry_cli_exports_all_registered_commands() -> None:
    """CLI facade registers every command it exports."""
    assert set(cli_mod.cli.commands) == {"info", "send"}
    assert cli_mod.cli.commands["send"] is cli_mod.cli_send
    assert cli_mod.cli.commands["info"] is cli_mod.cli_info
