"""Canonical models shared across kypi modules.

The models fall into two groups:

**Registry models** -- the static description of an API:
    :class:`HTTPMethod`, :class:`Endpoint` and the :data:`EndpointGroup`
    tree alias. Endpoints are frozen once created.

**Configuration models** -- supplied once per client or loaded from disk:
    :class:`ClientConfig` (per client instance) and :class:`ProjectConfig`
    (the optional ``./kypi.json`` file read by the CLI).

:class:`Form` is the multipart payload type: a call input or override body
of this type is always sent as a raw body, never JSON-encoded.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HTTPMethod(str, enum.Enum):
    """HTTP methods an endpoint may declare."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    HEAD = "head"
    DELETE = "delete"

    @property
    def carries_query_input(self) -> bool:
        """Whether an unstructured mapping input is sent as the query string."""
        return self in (HTTPMethod.GET, HTTPMethod.HEAD)


class Endpoint(BaseModel):
    """Static metadata describing one HTTP operation.

    Created through the factories in :mod:`kypi.endpoints` and never mutated
    afterwards.

    Example::

        Endpoint(method="get", url="/users/:id", auth=True)
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    url: str = Field(description="URL template relative to the base URL, e.g. /users/:id")
    auth: bool = Field(default=False, description="Send an Authorization header")

    @field_validator("method", mode="before")
    @classmethod
    def _lower_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value


EndpointGroup = Mapping[str, Union[Endpoint, "EndpointGroup"]]
"""A named tree of :class:`Endpoint` leaves and nested groups."""


@dataclass
class Form:
    """A multipart/form-encoded payload.

    Attributes:
        fields: Plain form fields.
        files: File parts, in any shape accepted by ``httpx`` ``files=``.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    files: dict[str, Any] = field(default_factory=dict)


class ClientConfig(BaseModel):
    """Per-client configuration passed once to the client builder.

    Attributes:
        base_url: Prefix for every endpoint URL. Never scanned for template
            tokens, so ports such as ``:8080`` are safe.
        get_token: Zero-argument callable returning a token, ``None``, or an
            awaitable resolving to either. Called on every authed request.
        on_error: Observer invoked with any transport error before it is
            re-raised unchanged.
        transport: Callable ``(url, options)`` that performs the request.
            Defaults to an httpx-backed transport.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base_url: str
    get_token: Optional[Callable[[], Any]] = None
    on_error: Optional[Callable[[BaseException], Any]] = None
    transport: Optional[Callable[..., Any]] = None


class ProjectConfig(BaseModel):
    """Project-local settings read from ``./kypi.json`` by the CLI.

    Unknown keys are preserved in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    registry: Optional[str] = Field(
        default=None, description="Import path of the endpoint registry, e.g. myapi.endpoints:API"
    )
    base_url: Optional[str] = None
    token_source: Optional[str] = Field(
        default=None, description="Credential source: env:VAR, file:/path, prompt"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
