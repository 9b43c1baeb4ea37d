"""Send CLI command.

Reads a JSON payload, builds a client from the layered configuration and
prints the normalized send result as JSON.

Contents:
    * :func:`cli_send` - Send one message through the ``send`` endpoint.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import lib_log_rich.runtime
import orjson
import rich_click as click
from pydantic import ValidationError

from mailchannels_client import __init__conf__
from mailchannels_client.adapters.mailchannels import MailChannelsClient, TransportAbortedError
from mailchannels_client.domain.errors import ConfigurationError, MailChannelsError, PayloadValidationError
from mailchannels_client.domain.models import SendResult

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import CLIContext, get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


def read_payload(source: str) -> Any:
    """Read and decode a JSON payload from a file path or ``-`` for stdin.

    Raises:
        FileNotFoundError: When the path does not exist.
        orjson.JSONDecodeError: When the content is not valid JSON.
    """
    if source == "-":
        raw = click.get_binary_stream("stdin").read()
    else:
        raw = Path(source).read_bytes()
    return orjson.loads(raw)


def build_client(cli_ctx: CLIContext) -> MailChannelsClient:
    """Load client settings from the CLI configuration and build a client.

    Raises:
        SystemExit: With CONFIG_ERROR when settings are missing or invalid.
    """
    try:
        return cli_ctx.create_client()
    except (ConfigurationError, ValidationError) as exc:
        logger.error("Client configuration error", extra={"error": str(exc)})
        click.echo(f"\nError: Configuration error - {exc}", err=True)
        click.echo(
            "Configure [mailchannels] api_key and [mailchannels.dkim] in your config file "
            f"or via {__init__conf__.LAYEREDCONF_SLUG.upper().replace('-', '_')}___MAILCHANNELS__* variables.",
            err=True,
        )
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc


def _echo_result(result: SendResult) -> None:
    click.echo(orjson.dumps(result.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8"))


def _handle_api_error(exc: MailChannelsError) -> None:
    """Report an API rejection with its retry hints.

    Raises:
        SystemExit: Always, with API_FAILURE.
    """
    logger.error(
        "MailChannels API error",
        extra={"status": exc.status, "request_id": exc.request_id, "retry_after_seconds": exc.retry_after_seconds},
    )
    click.echo(f"\nError: {exc.message}", err=True)
    click.echo(f"  status: {exc.status} {exc.status_text or ''}".rstrip(), err=True)
    if exc.request_id:
        click.echo(f"  request id: {exc.request_id}", err=True)
    if exc.retry_after_seconds is not None:
        click.echo(f"  retry after: {exc.retry_after_seconds}s", err=True)
    raise SystemExit(ExitCode.API_FAILURE) from exc


def _fail(
    exc: Exception,
    log_message: str,
    user_message: str,
    *,
    exit_code: ExitCode,
    log_traceback: bool = False,
) -> None:
    """Log *exc*, print a one-line error and exit with *exit_code*."""
    logger.error(log_message, extra={"error": str(exc), "error_type": type(exc).__name__}, exc_info=log_traceback)
    click.echo(f"\nError: {user_message} - {exc}", err=True)
    raise SystemExit(exit_code) from exc


def execute_with_send_error_handling(operation: Callable[[], SendResult]) -> None:
    """Run *operation* and translate failures into exit codes.

    Exceptions are caught most specific first:

    1. ConfigurationError -> CONFIG_ERROR (78)
    2. FileNotFoundError -> FILE_NOT_FOUND (2)
    3. PayloadValidationError, ValueError -> INVALID_ARGUMENT (22)
    4. MailChannelsError -> API_FAILURE (69)
    5. httpx.HTTPError, TransportAbortedError -> TRANSPORT_FAILURE (74)
    6. Exception -> GENERAL_ERROR (1), re-raised when DEVELOPMENT_MODE is set

    Raises:
        SystemExit: On any failure.
    """
    try:
        result = operation()
    except ConfigurationError as exc:
        _fail(exc, "Client configuration error", "Configuration error", exit_code=ExitCode.CONFIG_ERROR)
    except FileNotFoundError as exc:
        _fail(exc, "Payload file not found", "Payload file not found", exit_code=ExitCode.FILE_NOT_FOUND)
    except PayloadValidationError as exc:
        _fail(exc, "Invalid message payload", "Invalid message payload", exit_code=ExitCode.INVALID_ARGUMENT)
    except ValueError as exc:
        _fail(exc, "Unreadable message payload", "Payload is not valid JSON", exit_code=ExitCode.INVALID_ARGUMENT)
    except MailChannelsError as exc:
        _handle_api_error(exc)
    except (httpx.HTTPError, TransportAbortedError) as exc:
        _fail(exc, "Transport failure", "Request failed", exit_code=ExitCode.TRANSPORT_FAILURE)
    except Exception as exc:
        if os.environ.get("DEVELOPMENT_MODE"):
            raise
        _fail(
            exc,
            "Unexpected error sending message",
            "Unexpected error",
            exit_code=ExitCode.GENERAL_ERROR,
            log_traceback=True,
        )
    else:
        _echo_result(result)
        logger.info("Message sent via CLI", extra={"status": result.status, "message_id": result.id})


@click.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("payload_file", metavar="PAYLOAD_FILE", type=str)
@click.option("--dry-run", is_flag=True, default=False, help="Validate the message server-side without delivering it")
@click.option("--idempotency-key", default=None, help="Idempotency-Key header value for safe retries")
@click.pass_context
def cli_send(ctx: click.Context, payload_file: str, dry_run: bool, idempotency_key: str | None) -> None:
    """Send the JSON message in PAYLOAD_FILE (use - for stdin).

    DKIM fields missing from the payload are filled from the configured
    ``[mailchannels.dkim]`` defaults.
    """
    cli_ctx = get_cli_context(ctx)
    extra = {"command": "send", "dry_run": dry_run, "payload_file": payload_file}

    with lib_log_rich.runtime.bind(job_id="cli-send", extra=extra):
        client = build_client(cli_ctx)

        def _operation() -> SendResult:
            payload = read_payload(payload_file)
            return asyncio.run(client.send(payload, dry_run=dry_run, idempotency_key=idempotency_key))

        execute_with_send_error_handling(_operation)


__all__ = [
    "build_client",
    "cli_send",
    "execute_with_send_error_handling",
    "read_payload",
]
