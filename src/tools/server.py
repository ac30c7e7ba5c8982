"""
Tools for server operations.

This module contains tools for getting the server status and testing the storage backend.
"""

import logging
from typing import Any

from mcp.server.fastmcp import Context

from utils.config import get_settings
from utils.constants import MCP_SERVER_NAME
from utils.context import get_catalog_store

logger = logging.getLogger(f"{MCP_SERVER_NAME}.tools.server")


def get_server_configuration_status(ctx: Context) -> dict[str, Any]:
    """Get the server status and configuration without opening the storage.
    This tool can be used to verify the server is running and check configuration.
    """
    settings = get_settings()

    # Don't expose sensitive information like passwords
    configuration = {
        "storage": settings.get("storage", "Not set"),
        "storage_path": settings.get("storage_path", "Not set"),
        "connection_string": settings.get("connection_string", "Not set"),
        "username": settings.get("username", "Not set"),
        "bucket_name": settings.get("bucket_name", "Not set"),
        "scope_name": settings.get("scope_name", "Not set"),
        "collection_name": settings.get("collection_name", "Not set"),
        "read_only_mode": settings.get("read_only_mode", False),
        "password_configured": bool(settings.get("password")),
    }

    app_context = ctx.request_context.lifespan_context
    storage_status: dict[str, Any] = {"store_opened": app_context.store is not None}
    if app_context.store is not None:
        storage_status["collections"] = app_context.store.inspect()

    return {
        "server_name": MCP_SERVER_NAME,
        "status": "running",
        "configuration": configuration,
        "storage": storage_status,
    }


def test_storage_connection(ctx: Context) -> dict[str, Any]:
    """Test that the storage backend can be opened and read.
    Returns the backend description and the state of each collection.
    """
    try:
        store = get_catalog_store(ctx)
        collections = store.inspect()
    except Exception as e:
        logger.error(f"Storage connection test failed: {e}")
        return {
            "status": "error",
            "error": str(e),
            "message": "Failed to open catalog storage",
        }
    return {
        "status": "success",
        "backend": store.backend.describe(),
        "collections": collections,
        "message": "Successfully connected to catalog storage",
    }
