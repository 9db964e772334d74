"""Configuration resolution for the kypi command line.

* **Project config** -- an optional ``./kypi.json`` deserialised into a
  :class:`~kypi.models.ProjectConfig`. See :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_config` layers CLI flags over
  environment variables over the project file over defaults.
* **Credential resolution** -- :func:`resolve_credential` reads secrets from
  env vars, files, or an interactive prompt.
* **Data directory** -- :func:`get_data_dir` holds crash logs written by
  :func:`kypi.app.main`.

Library users normally build a :class:`~kypi.models.ClientConfig` directly
and never touch this module.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
from pathlib import Path
from typing import Optional

from kypi.exceptions import ConfigError
from kypi.models import ProjectConfig

_APP_NAME = "kypi"
_PROJECT_CONFIG_FILENAME = "kypi.json"

ENV_REGISTRY = "KYPI_REGISTRY"
ENV_BASE_URL = "KYPI_BASE_URL"
ENV_TOKEN_SOURCE = "KYPI_TOKEN_SOURCE"
ENV_TIMEOUT = "KYPI_TIMEOUT"


# --- Paths ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/kypi/`` (default ``~/.local/share/kypi/``).
    On macOS/Windows: ``~/.kypi/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config(directory: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Load project-local configuration from ``kypi.json``.

    Args:
        directory: Directory to look in. Defaults to the current directory.

    Returns:
        The parsed config, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            validation.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ProjectConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_registry: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_token_source: Optional[str] = None,
) -> ProjectConfig:
    """Resolve the effective CLI configuration.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``KYPI_REGISTRY``, ``KYPI_BASE_URL``,
           ``KYPI_TOKEN_SOURCE``, ``KYPI_TIMEOUT``)
        3. Project config (``./kypi.json``)
        4. Defaults

    Raises:
        ConfigError: If the project file is invalid or ``KYPI_TIMEOUT`` is
            not a number.
    """
    config = load_project_config() or ProjectConfig()

    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        try:
            config.timeout = float(env_timeout)
        except ValueError as exc:
            raise ConfigError(f"{ENV_TIMEOUT} must be a number, got {env_timeout!r}") from exc

    for attr, env_var, cli_value in (
        ("registry", ENV_REGISTRY, cli_registry),
        ("base_url", ENV_BASE_URL, cli_base_url),
        ("token_source", ENV_TOKEN_SOURCE, cli_token_source),
    ):
        env_value = os.environ.get(env_var)
        if cli_value is not None:
            setattr(config, attr, cli_value)
        elif env_value:
            setattr(config, attr, env_value)

    return config


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter token: ")

    raise ConfigError(f"Unknown credential source format: {source}")
