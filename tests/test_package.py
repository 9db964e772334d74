"""Tests for the top-level ``kypi`` namespace."""

from __future__ import annotations

import types

import kypi
import kypi.client
from kypi.client.builder import build_client, create_client, create_sync_client
from kypi.client.transport import SyncHttpxTransport


def test_client_attribute_is_the_subpackage() -> None:
    assert isinstance(kypi.client, types.ModuleType)
    assert kypi.client.build_client is build_client
    assert kypi.client.SyncHttpxTransport is SyncHttpxTransport


def test_shortcuts_exported() -> None:
    assert kypi.create_client is create_client
    assert kypi.create_sync_client is create_sync_client
    assert "client" not in kypi.__all__


def test_all_names_resolve() -> None:
    for name in kypi.__all__:
        assert hasattr(kypi, name), name
