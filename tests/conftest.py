"""Shared test fixtures for kypi.

Provides a sample endpoint registry, a recording fake transport, isolated
config environments, output state management and a CLI runner. These
fixtures are discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from kypi.client.options import RequestOptions
from kypi.endpoints import aget, apost, get, post
from kypi.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Registry and transport fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_registry() -> dict[str, Any]:
    """A small registry with public and authed endpoints."""
    return {
        "health": get("/health"),
        "foo": {
            "get": get("/foo/:id"),
            "list": get("/foo"),
            "create": post("/foo"),
        },
        "users": {
            "me": aget("/users/me"),
            "create": apost("/users"),
        },
    }


class RecordingTransport:
    """Fake transport that records every ``(url, options)`` it receives.

    Returns *response* (or the result of calling it with the url and
    options when it is callable), or raises *error* when set.
    """

    def __init__(self, response: Any = "ok", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, RequestOptions]] = []

    def __call__(self, url: str, options: RequestOptions) -> Any:
        self.calls.append((url, options))
        if self.error is not None:
            raise self.error
        if callable(self.response):
            return self.response(url, options)
        return self.response

    @property
    def last(self) -> tuple[str, RequestOptions]:
        return self.calls[-1]


class AsyncRecordingTransport(RecordingTransport):
    """Same as :class:`RecordingTransport`, but returns a coroutine."""

    async def __call__(self, url: str, options: RequestOptions) -> Any:  # type: ignore[override]
        return super().__call__(url, options)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def async_transport() -> AsyncRecordingTransport:
    return AsyncRecordingTransport()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME under tmp_path, clears all KYPI_* environment
    variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["KYPI_REGISTRY", "KYPI_BASE_URL", "KYPI_TOKEN_SOURCE", "KYPI_TIMEOUT"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format output manager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a verbose, colourless output manager so debug lines reach stderr."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
