"""Classification of call input into path params, query and payload.

A generated endpoint function accepts a single *input* value. It is turned
into one of two explicit variants exactly once, at the call boundary, by
:func:`as_call_input`:

* :class:`Structured` -- a mapping carrying any of the ``params``, ``query``
  or ``body`` keys. Each present key is taken as-is; absent keys stay absent.
* :class:`Raw` -- anything else: an unstructured mapping, a primitive, a
  list, ``bytes`` or a :class:`~kypi.models.Form`.

Callers may also pass either variant directly to skip the key probing.

:func:`resolve_input` then applies the disambiguation policy:

1. structured keys always win over shape inference;
2. a raw mapping becomes the query string for GET/HEAD and the JSON body
   otherwise, unless the override options already carry ``body``/``json``,
   in which case the input is dropped;
3. a raw non-mapping is always the payload: ``bytes``/``bytearray``/``Form``
   as the raw body, anything else as JSON. GET and HEAD never send one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from kypi.models import Form, HTTPMethod


class _Unset:
    """Marker for a key the caller did not supply."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

STRUCTURED_KEYS = ("params", "query", "body")

BINARY_TYPES = (bytes, bytearray, memoryview, Form)


@dataclass(frozen=True)
class Raw:
    """Call input with no structural keys."""

    value: Any


@dataclass(frozen=True)
class Structured:
    """Call input split into its components. Unsupplied parts are ``UNSET``."""

    params: Any = UNSET
    query: Any = UNSET
    body: Any = UNSET


CallInput = Union[None, Raw, Structured]


@dataclass
class ResolvedInput:
    """The components extracted from a call input.

    ``json`` and ``body`` are mutually exclusive; at most one is set.
    """

    params: Optional[Mapping[str, Any]] = None
    query: Any = UNSET
    json: Any = UNSET
    body: Any = UNSET


def as_call_input(value: Any) -> CallInput:
    """Tag a caller-supplied value as :class:`Raw` or :class:`Structured`."""
    if value is None or isinstance(value, (Raw, Structured)):
        return value
    if isinstance(value, Mapping) and any(key in value for key in STRUCTURED_KEYS):
        return Structured(**{key: value[key] for key in STRUCTURED_KEYS if key in value})
    return Raw(value)


def is_binary(value: Any) -> bool:
    """Whether *value* is sent as a raw body rather than JSON."""
    return isinstance(value, BINARY_TYPES)


def has_explicit_payload(overrides: Optional[Mapping[str, Any]]) -> bool:
    """Whether the override options already carry a ``body`` or ``json`` payload."""
    if not overrides:
        return False
    return overrides.get("body") is not None or overrides.get("json") is not None


def _as_payload(resolved: ResolvedInput, value: Any, method: HTTPMethod) -> None:
    # GET and HEAD requests carry no payload.
    if method.carries_query_input:
        return
    if is_binary(value):
        resolved.body = value
    else:
        resolved.json = value


def resolve_input(
    call_input: CallInput,
    method: HTTPMethod,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ResolvedInput:
    """Decide path params, query and payload for one call.

    Args:
        call_input: The tagged input, as produced by :func:`as_call_input`.
        method: The endpoint's HTTP method.
        overrides: The caller's override options; only consulted to see
            whether a payload is supplied through them.

    Returns:
        A :class:`ResolvedInput`. GET and HEAD never carry a payload, so a
        structured ``body`` on those methods is dropped.
    """
    resolved = ResolvedInput()

    if call_input is None:
        return resolved

    if isinstance(call_input, Structured):
        if call_input.params is not UNSET:
            resolved.params = call_input.params
        if call_input.query is not UNSET and call_input.query is not None:
            resolved.query = call_input.query
        if call_input.body is not UNSET and call_input.body is not None:
            _as_payload(resolved, call_input.body, method)
        return resolved

    value = call_input.value
    if isinstance(value, Mapping):
        if method.carries_query_input:
            resolved.query = value
        elif not has_explicit_payload(overrides):
            resolved.json = value
        return resolved

    if value is not None:
        _as_payload(resolved, value, method)
    return resolved
