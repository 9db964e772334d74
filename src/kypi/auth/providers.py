"""Token providers built from credential source descriptors.

A *source* uses the same descriptor syntax as the CLI configuration
(``env:VAR``, ``file:/path``, ``prompt``); see
:func:`kypi.config.resolve_credential`. The provider resolves the source
again on every call, so rotating a token file or environment variable takes
effect on the next request.
"""

from __future__ import annotations

from typing import Optional

from kypi.auth.bearer import TokenProvider
from kypi.config import resolve_credential


def token_from_source(source: str) -> TokenProvider:
    """Return a ``get_token`` provider reading the credential from *source*.

    Example::

        client = build_client(API, ClientConfig(
            base_url="https://api.example.com",
            get_token=token_from_source("env:API_TOKEN"),
        ))
    """

    def _get_token() -> Optional[str]:
        return resolve_credential(source) or None

    return _get_token


def static_token(token: Optional[str]) -> TokenProvider:
    """Return a provider that always yields *token*."""

    def _get_token() -> Optional[str]:
        return token

    return _get_token
