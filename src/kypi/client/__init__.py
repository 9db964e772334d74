"""Client construction and per-call request resolution.

Modules:
    builder: walks an endpoint registry into a tree of endpoint functions.
    inputs: splits call input into path params, query and payload.
    url: ``:token`` URL template interpolation.
    options: default request options and override merging.
    handle: deferred, memoized response handles.
    transport: default httpx-backed transports.
    response: rendering responses for the command line.

Example::

    from kypi.client import build_client
    from kypi.models import ClientConfig

    api = build_client(API, ClientConfig(base_url="https://api.example.com"))
    users = await api.users.list({"page": 2}).json()
"""

from kypi.client.builder import (
    ClientNamespace,
    build_client,
    build_sync_client,
    create_client,
    create_sync_client,
)
from kypi.client.handle import ResponseHandle, SyncResponseHandle
from kypi.client.inputs import UNSET, Raw, Structured
from kypi.client.options import RequestOptions, ResolvedRequest
from kypi.client.transport import HttpxTransport, SyncHttpxTransport

__all__ = [
    "ClientNamespace",
    "HttpxTransport",
    "Raw",
    "RequestOptions",
    "ResolvedRequest",
    "ResponseHandle",
    "Structured",
    "SyncHttpxTransport",
    "SyncResponseHandle",
    "UNSET",
    "build_client",
    "build_sync_client",
    "create_client",
    "create_sync_client",
]
