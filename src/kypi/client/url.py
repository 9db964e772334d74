"""URL template interpolation.

Endpoint URLs use ``:name`` tokens (``/users/:id/posts/:post_id``). Only the
endpoint's own template is scanned; the base URL is joined afterwards so a
port such as ``http://host:8080`` is never mistaken for a token.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional
from urllib.parse import quote

from kypi.exceptions import MissingPathParamError

_TOKEN_RE = re.compile(r":(\w+)")


def template_params(template: str) -> list[str]:
    """Return the token names in *template*, in order of appearance."""
    return _TOKEN_RE.findall(template)


def interpolate(template: str, params: Optional[Mapping[str, Any]]) -> str:
    """Substitute every ``:name`` token in *template* from *params*.

    Values are URL-encoded with no safe characters, so ``/`` inside a value
    becomes ``%2F``.

    Raises:
        MissingPathParamError: If a token has no value (absent or ``None``).

    Example::

        >>> interpolate("/foo/:id", {"id": 2})
        '/foo/2'
    """
    values = params or {}

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        value = values.get(name)
        if value is None:
            raise MissingPathParamError(name)
        return quote(str(value), safe="")

    return _TOKEN_RE.sub(_substitute, template)


def join_url(base_url: str, path: str) -> str:
    """Concatenate an already-interpolated *path* onto *base_url*."""
    return f"{base_url}{path}" if base_url else path
