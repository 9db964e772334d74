"""Request options: computed defaults merged with caller overrides.

The client computes default options from the endpoint method, the auth
header and the resolved query/payload, then merges the caller's override
mapping field by field:

* ``headers`` -- shallow union, override keys win; names compare
  case-insensitively and the override's spelling is kept;
* ``query`` (or its httpx spelling ``params``) -- shallow union when both
  sides are mappings, otherwise the override replaces the computed value (a
  raw query string or a list of pairs);
* ``json`` / ``body`` -- an explicit override payload replaces any inferred
  payload entirely;
* any other key (``method``, ``timeout``, ``cookies``, ...) is passed through
  verbatim, override winning.

The keys ``url``, ``content``, ``data`` and ``files`` are rejected with
:class:`~kypi.exceptions.InvalidUsageError`: they would replace the resolved
URL or payload behind the client's back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from kypi.client.inputs import UNSET, ResolvedInput
from kypi.exceptions import InvalidUsageError
from kypi.models import HTTPMethod

_PAYLOAD_KEYS = ("json", "body")
_MERGED_KEYS = ("method", "headers", "query", "params", *_PAYLOAD_KEYS)

RESERVED_OVERRIDE_KEYS = ("url", "content", "data", "files")


@dataclass
class RequestOptions:
    """Options handed to the transport together with the URL.

    Attributes:
        method: HTTP method, upper-case (``"GET"``).
        headers: Request headers.
        query: Query string: a mapping, a raw string, a list of pairs, or
            ``None`` for no query.
        json: JSON-serialisable payload, or ``None``.
        body: Raw payload (``bytes``, ``str`` or :class:`~kypi.models.Form`),
            or ``None``.
        extra: Every other override field, passed through verbatim.
    """

    method: str
    headers: dict[str, str] = field(default_factory=dict)
    query: Any = None
    json: Any = None
    body: Any = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ResolvedRequest:
    """A fully resolved request, built per call and discarded after dispatch."""

    url: str
    options: RequestOptions

    @property
    def method(self) -> str:
        return self.options.method


def _is_plain_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def merge_query(computed: Any, override: Any) -> Any:
    """Merge query parameters.

    Both mappings → shallow union with override keys winning. Otherwise a
    non-``None`` override replaces the computed value wholesale.
    """
    if _is_plain_mapping(computed) and _is_plain_mapping(override):
        return {**computed, **override}
    if override is not None:
        return override
    return computed


def merge_headers(computed: Mapping[str, str], override: Optional[Mapping[str, str]]) -> dict[str, str]:
    """Merge headers, matching names case-insensitively.

    An override header replaces every computed header with the same name in
    any casing, so ``{"authorization": "X"}`` replaces ``Authorization``.
    """
    merged = dict(computed)
    for name, value in (override or {}).items():
        for existing in [key for key in merged if key.lower() == name.lower()]:
            del merged[existing]
        merged[name] = value
    return merged


def check_overrides(overrides: Optional[Mapping[str, Any]]) -> None:
    """Reject override keys that would replace the resolved URL or payload.

    Raises:
        InvalidUsageError: If *overrides* contains a reserved key.
    """
    if not overrides:
        return
    for key in RESERVED_OVERRIDE_KEYS:
        if key in overrides:
            hint = "use path params and the base URL" if key == "url" else "pass the payload as 'json' or 'body'"
            raise InvalidUsageError(f"Option '{key}' cannot be overridden; {hint}")


def default_options(
    method: HTTPMethod,
    resolved: ResolvedInput,
    auth_headers: Optional[Mapping[str, str]] = None,
) -> RequestOptions:
    """Build the options implied by the endpoint and the call input."""
    return RequestOptions(
        method=method.value.upper(),
        headers=dict(auth_headers or {}),
        query=None if resolved.query is UNSET else resolved.query,
        json=None if resolved.json is UNSET else resolved.json,
        body=None if resolved.body is UNSET else resolved.body,
    )


def merge_options(
    computed: RequestOptions,
    overrides: Optional[Mapping[str, Any]] = None,
) -> RequestOptions:
    """Merge caller *overrides* into *computed* defaults.

    Neither argument is mutated. ``params`` is merged like ``query``, before
    it.

    Raises:
        InvalidUsageError: If *overrides* contains a reserved key.

    Example::

        >>> merged = merge_options(
        ...     RequestOptions(method="GET", headers={"Authorization": "Bearer t"}),
        ...     {"headers": {"Authorization": "Custom"}, "timeout": 5},
        ... )
        >>> merged.headers["Authorization"], merged.extra["timeout"]
        ('Custom', 5)
    """
    if not overrides:
        return RequestOptions(
            method=computed.method,
            headers=dict(computed.headers),
            query=computed.query,
            json=computed.json,
            body=computed.body,
            extra=dict(computed.extra),
        )

    check_overrides(overrides)
    query = merge_query(computed.query, overrides.get("params"))
    merged = RequestOptions(
        method=str(overrides.get("method") or computed.method).upper(),
        headers=merge_headers(computed.headers, overrides.get("headers")),
        query=merge_query(query, overrides.get("query")),
        json=computed.json,
        body=computed.body,
    )

    if any(overrides.get(key) is not None for key in _PAYLOAD_KEYS):
        merged.json = overrides.get("json")
        merged.body = overrides.get("body")

    passthrough = {
        key: value
        for key, value in overrides.items()
        if key not in _MERGED_KEYS
    }
    merged.extra = {**computed.extra, **passthrough}
    return merged
