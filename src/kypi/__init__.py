"""kypi -- typed-feeling HTTP clients from a declarative endpoint tree.

Declare an API as a nested mapping of endpoint descriptors, then build a
client whose shape mirrors it. Each endpoint becomes a function that fills
path parameters, query strings, bodies and ``Authorization`` headers at call
time and returns a deferred handle that sends the request once, on first
use::

    from kypi import ClientConfig, aget, build_client, get, post

    API = {
        "health": get("/health"),
        "users": {"get": aget("/users/:id"), "create": post("/users")},
    }

    api = build_client(API, ClientConfig(
        base_url="https://api.example.com",
        get_token=lambda: "secret",
    ))
    user = await api.users.get({"params": {"id": 7}}).json()

Modules:
    endpoints: endpoint factories and registry helpers.
    models: pydantic models shared across the package.
    client: client builder and request resolution.
    auth: bearer token resolution and token providers.
    config: CLI configuration and credential sources.
    exceptions: exception hierarchy with exit-code mapping.
    output: stdout/stderr output with Rich support.
    app: the ``kypi`` command line.
"""

from httpx import HTTPError, HTTPStatusError

from kypi.auth import token_from_source
from kypi.client import (
    ClientNamespace,
    Raw,
    RequestOptions,
    ResponseHandle,
    Structured,
    SyncResponseHandle,
    build_client,
    build_sync_client,
    create_client,
    create_sync_client,
)
from kypi.endpoints import (
    adel,
    adelete,
    aep,
    aget,
    ahead,
    apatch,
    apost,
    aput,
    authed,
    del_,
    delete,
    endpoint,
    ep,
    get,
    head,
    patch,
    post,
    put,
)
from kypi.exceptions import (
    ConfigError,
    EndpointDefinitionError,
    InvalidUsageError,
    KypiError,
    MissingPathParamError,
)
from kypi.models import ClientConfig, Endpoint, EndpointGroup, Form, HTTPMethod

__version__ = "0.3.0"

__all__ = [
    "ClientConfig",
    "ClientNamespace",
    "ConfigError",
    "Endpoint",
    "EndpointDefinitionError",
    "EndpointGroup",
    "Form",
    "HTTPError",
    "HTTPMethod",
    "HTTPStatusError",
    "InvalidUsageError",
    "KypiError",
    "MissingPathParamError",
    "Raw",
    "RequestOptions",
    "ResponseHandle",
    "Structured",
    "SyncResponseHandle",
    "adel",
    "adelete",
    "aep",
    "aget",
    "ahead",
    "apatch",
    "apost",
    "aput",
    "authed",
    "build_client",
    "build_sync_client",
    "create_client",
    "del_",
    "delete",
    "endpoint",
    "ep",
    "get",
    "head",
    "patch",
    "post",
    "put",
    "create_sync_client",
    "token_from_source",
]
