"""
Unit tests for utility modules.

Tests for:
- utils/constants.py - Constants validation
- utils/config.py - Settings and storage validation
- utils/connection.py - Collection opening
- utils/context.py - Store and session accessors
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from couchbase.diagnostics import ServiceType
from conftest import make_context

from store.models import Session
from utils.config import (
    get_settings,
    set_settings,
    validate_required_param,
    validate_storage_settings,
)
from utils.connection import connect_to_collection
from utils.constants import (
    ALLOWED_STORAGE_BACKENDS,
    ALLOWED_TRANSPORTS,
    COLLECTION_KEYS,
    DEFAULT_STORAGE,
    DEFAULT_TRANSPORT,
    MCP_SERVER_NAME,
    NETWORK_TRANSPORTS,
    NETWORK_TRANSPORTS_SDK_MAPPING,
)
from utils.context import get_catalog_store, require_session


class TestConstants:
    """Unit tests for constants.py."""

    def test_server_name(self) -> None:
        assert MCP_SERVER_NAME == "movie-catalog"

    def test_collection_keys(self) -> None:
        assert COLLECTION_KEYS == (
            "crud_peliculas_users",
            "crud_peliculas_session",
            "crud_peliculas_movies",
        )

    def test_defaults_are_allowed(self) -> None:
        assert DEFAULT_STORAGE in ALLOWED_STORAGE_BACKENDS
        assert DEFAULT_TRANSPORT in ALLOWED_TRANSPORTS

    def test_network_transports_are_mapped(self) -> None:
        for transport in NETWORK_TRANSPORTS:
            assert transport in ALLOWED_TRANSPORTS
            assert transport in NETWORK_TRANSPORTS_SDK_MAPPING


class TestConfig:
    """Unit tests for config.py."""

    def test_settings_round_trip(self) -> None:
        previous = get_settings()
        try:
            set_settings({"storage": "memory"})
            assert get_settings() == {"storage": "memory"}
        finally:
            set_settings(previous)

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_validate_required_param_missing(self, value) -> None:
        with pytest.raises(ValueError, match="storage_path is required"):
            validate_required_param(value, "storage_path")

    def test_validate_required_param_present(self) -> None:
        validate_required_param("x", "name")
        validate_required_param(0, "count")

    def test_file_storage_needs_path(self) -> None:
        with pytest.raises(ValueError, match="storage_path"):
            validate_storage_settings({"storage": "file", "storage_path": ""})

    def test_couchbase_missing_password(self) -> None:
        settings = {
            "storage": "couchbase",
            "connection_string": "couchbase://localhost",
            "username": "admin",
            "bucket_name": "catalog",
        }
        with pytest.raises(ValueError, match="password"):
            validate_storage_settings(settings)

    def test_couchbase_defaults_scope_and_collection(self) -> None:
        settings = {
            "storage": "couchbase",
            "connection_string": "couchbase://localhost",
            "username": "admin",
            "password": "password",
            "bucket_name": "catalog",
            "scope_name": "",
        }
        validate_storage_settings(settings)
        assert settings["scope_name"] == "_default"
        assert settings["collection_name"] == "_default"

    def test_unknown_storage(self) -> None:
        with pytest.raises(ValueError, match="Unknown storage backend"):
            validate_storage_settings({})


class TestConnection:
    """Unit tests for connection.py."""

    def test_connect_to_collection_waits_for_key_value(self) -> None:
        cluster = MagicMock()
        with patch("utils.connection.WaitUntilReadyOptions") as options:
            collection = connect_to_collection(cluster, "catalog", "inventory", "movies")

        options.assert_called_once_with(service_types=[ServiceType.KeyValue])
        assert cluster.wait_until_ready.call_args.args[1] is options.return_value
        cluster.bucket.assert_called_once_with("catalog")
        scope = cluster.bucket.return_value.scope
        scope.assert_called_once_with("inventory")
        assert collection is scope.return_value.collection.return_value

    def test_connect_to_collection_propagates_errors(self) -> None:
        cluster = MagicMock()
        cluster.bucket.return_value.scope.side_effect = RuntimeError("no such scope")
        with pytest.raises(RuntimeError, match="no such scope"):
            connect_to_collection(cluster, "catalog", "missing", "movies")


class TestContext:
    """Unit tests for context.py."""

    def test_get_catalog_store(self, ctx: Any, store) -> None:
        assert get_catalog_store(ctx) is store

    def test_require_session(self, logged_in_ctx: Any) -> None:
        assert require_session(logged_in_ctx) == Session(username="admin", name="Admin")

    def test_require_session_without_login(self, ctx: Any) -> None:
        with pytest.raises(ValueError, match="No active session"):
            require_session(ctx)

    def test_store_opened_from_settings(self) -> None:
        previous = get_settings()
        try:
            set_settings({"storage": "memory"})
            ctx = make_context(None)
            store = get_catalog_store(ctx)
            assert get_catalog_store(ctx) is store
            assert store.authenticate("admin", "admin123") is not None
        finally:
            set_settings(previous)
