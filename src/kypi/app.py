"""Typer application and CLI entry point for kypi.

The ``kypi`` command loads an endpoint registry from an import path and
either lists its routes or calls one endpoint through a blocking client::

    kypi routes --registry myapi.endpoints:API
    kypi call users.get --params '{"id": 7}' --token-source env:API_TOKEN

The registry, base URL and token source come from CLI flags, ``KYPI_*``
environment variables or ``./kypi.json`` (see :func:`kypi.config.resolve_config`).

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under the
data directory.
"""

from __future__ import annotations

import json
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn, Optional

import httpx
import typer

from kypi import __version__
from kypi.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE, EXIT_HTTP_ERROR

app = typer.Typer(
    name="kypi",
    help="Call HTTP APIs declared as kypi endpoint registries.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"kypi {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the global output manager from the output flags."""
    from kypi.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _fail(exc: Exception) -> NoReturn:
    """Report *exc* on stderr and exit with the matching code."""
    from kypi.exceptions import KypiError
    from kypi.output import error

    if isinstance(exc, KypiError):
        error(str(exc))
        raise typer.Exit(exc.exit_code)
    if isinstance(exc, httpx.HTTPStatusError):
        error(f"HTTP {exc.response.status_code}: {exc.response.text[:200]}")
        raise typer.Exit(EXIT_HTTP_ERROR)
    if isinstance(exc, httpx.HTTPError):
        error(f"Request failed: {exc}")
        raise typer.Exit(EXIT_CONNECTION_ERROR)
    raise exc


def _parse_json_option(flag: str, raw: Optional[str]) -> Any:
    """Parse a JSON-valued option, raising InvalidUsageError on bad input."""
    from kypi.exceptions import InvalidUsageError

    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"{flag} must be valid JSON: {exc}") from exc


def _resolve_body(raw: Optional[str]) -> Any:
    """Read ``@file`` bodies and decode JSON, keeping non-JSON text as-is."""
    from kypi.exceptions import InvalidUsageError

    if raw is None:
        return None
    if raw.startswith("@"):
        path = Path(raw[1:]).expanduser()
        if not path.is_file():
            raise InvalidUsageError(f"Body file not found: {path}")
        raw = path.read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _parse_headers(values: list[str]) -> dict[str, str]:
    from kypi.exceptions import InvalidUsageError

    headers: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise InvalidUsageError(f"Header must look like 'Name: value', got '{item}'")
        headers[name.strip()] = value.strip()
    return headers


def _require_registry(registry: Optional[str]) -> str:
    from kypi.exceptions import ConfigError

    if not registry:
        raise ConfigError(
            "No endpoint registry configured. Pass --registry, set KYPI_REGISTRY, "
            "or add 'registry' to kypi.json"
        )
    return registry


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("routes")
def routes_command(
    registry: Optional[str] = typer.Option(
        None, "--registry", "-r", help="Registry import path, e.g. myapi.endpoints:API."
    ),
) -> None:
    """List every endpoint in the registry."""
    from kypi.config import resolve_config
    from kypi.endpoints import iter_endpoints, load_registry
    from kypi.output import print_table

    try:
        config = resolve_config(cli_registry=registry)
        endpoints = load_registry(_require_registry(config.registry))
        rows = [
            [name, ep.method.value.upper(), ep.url, "yes" if ep.auth else "no"]
            for name, ep in iter_endpoints(endpoints)
        ]
    except Exception as exc:
        _fail(exc)
    print_table(["name", "method", "url", "auth"], rows, title=config.registry)


@app.command("call")
def call_command(
    name: str = typer.Argument(..., help="Dotted endpoint name, e.g. users.get."),
    registry: Optional[str] = typer.Option(
        None, "--registry", "-r", help="Registry import path, e.g. myapi.endpoints:API."
    ),
    params: Optional[str] = typer.Option(None, "--params", "-p", help="Path parameters as JSON."),
    query: Optional[str] = typer.Option(None, "--query", help="Query parameters as JSON."),
    body: Optional[str] = typer.Option(
        None, "--body", "-b", help="Request body as JSON string, or @filename to read from file."
    ),
    header: list[str] = typer.Option([], "--header", "-H", help="Extra header 'Name: value'."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override the base URL."),
    token_source: Optional[str] = typer.Option(
        None, "--token-source", help="Token source: env:VAR, file:/path, prompt."
    ),
) -> None:
    """Call one endpoint and print the response."""
    from kypi.auth import token_from_source
    from kypi.client import Structured, SyncHttpxTransport, build_sync_client
    from kypi.client.inputs import UNSET
    from kypi.client.response import format_api_response
    from kypi.config import resolve_config
    from kypi.endpoints import find_endpoint, load_registry
    from kypi.exceptions import ConfigError
    from kypi.models import ClientConfig

    try:
        config = resolve_config(
            cli_registry=registry,
            cli_base_url=base_url,
            cli_token_source=token_source,
        )
        endpoints = load_registry(_require_registry(config.registry))
        find_endpoint(endpoints, name)
        if config.base_url is None:
            raise ConfigError("No base URL configured. Pass --base-url or set KYPI_BASE_URL")

        api = build_sync_client(
            endpoints,
            ClientConfig(
                base_url=config.base_url,
                get_token=token_from_source(config.token_source) if config.token_source else None,
                transport=SyncHttpxTransport(timeout=config.timeout),
            ),
        )
        target: Any = api
        for part in name.split("."):
            target = target[part]

        call_input = Structured(
            params=_parse_json_option("--params", params) or {},
            query=_parse_json_option("--query", query) if query is not None else UNSET,
            body=_resolve_body(body) if body is not None else UNSET,
        )
        overrides = {"headers": _parse_headers(header)} if header else None
        response = target(call_input, overrides).result()
    except Exception as exc:
        _fail(exc)
    format_api_response(response)


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from kypi.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``kypi`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from kypi.exceptions import KypiError
        from kypi.output import error

        if isinstance(exc, KypiError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)

