"""Bridge from an :class:`httpx.Response` to the output system.

Used by the ``kypi call`` command: the status line goes to stderr and the
body, decoded as JSON when possible, goes to stdout.
"""

from __future__ import annotations

from typing import Any

import httpx

from kypi.output import format_response, info


def format_api_response(response: httpx.Response) -> None:
    """Print the status line to stderr and the body to stdout."""
    info(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
    data = extract_response_data(response)
    if data is not None:
        format_response(data)


def extract_response_data(response: httpx.Response) -> Any:
    """Return the decoded JSON body, the raw text, or ``None`` for an empty body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
