"""Authorization header resolution.

The main entry points are:

- :func:`aresolve_auth_headers` / :func:`resolve_auth_headers` -- ask the
  configured token provider for a token and build the
  ``Authorization: Bearer`` header when the endpoint requires auth.
- :func:`token_from_source` -- build a token provider from a credential
  source descriptor such as ``env:API_TOKEN``.
"""

from kypi.auth.bearer import (
    AUTHORIZATION,
    TokenProvider,
    aresolve_auth_headers,
    bearer_header,
    resolve_auth_headers,
)
from kypi.auth.providers import static_token, token_from_source

__all__ = [
    "AUTHORIZATION",
    "TokenProvider",
    "aresolve_auth_headers",
    "bearer_header",
    "resolve_auth_headers",
    "static_token",
    "token_from_source",
]
