"""
Movie Catalog MCP Utilities

This module contains utility functions for configuration, connection, and context management.
"""

# Configuration utilities
from .config import (
    get_settings,
    parse_disabled_tools,
    set_settings,
    validate_required_param,
    validate_storage_settings,
)

# Connection utilities
from .connection import (
    connect_to_bucket,
    connect_to_collection,
    connect_to_couchbase_cluster,
)

# Constants
from .constants import (
    ALLOWED_STORAGE_BACKENDS,
    ALLOWED_TRANSPORTS,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_READ_ONLY_MODE,
    DEFAULT_STORAGE,
    DEFAULT_STORAGE_PATH,
    DEFAULT_TRANSPORT,
    MCP_SERVER_NAME,
    NETWORK_TRANSPORTS,
    NETWORK_TRANSPORTS_SDK_MAPPING,
)

# Note: Individual modules create their own hierarchical loggers using:
# logger = logging.getLogger(f"{MCP_SERVER_NAME}.module.name")

__all__ = [
    # Config
    "get_settings",
    "set_settings",
    "parse_disabled_tools",
    "validate_required_param",
    "validate_storage_settings",
    # Connection
    "connect_to_couchbase_cluster",
    "connect_to_bucket",
    "connect_to_collection",
    # Constants
    "MCP_SERVER_NAME",
    "ALLOWED_STORAGE_BACKENDS",
    "ALLOWED_TRANSPORTS",
    "DEFAULT_HOST",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_PORT",
    "DEFAULT_READ_ONLY_MODE",
    "DEFAULT_STORAGE",
    "DEFAULT_STORAGE_PATH",
    "DEFAULT_TRANSPORT",
    "NETWORK_TRANSPORTS",
    "NETWORK_TRANSPORTS_SDK_MAPPING",
]
