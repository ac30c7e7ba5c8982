"""
Movie Catalog MCP Tools

This module contains all the MCP tools for the movie catalog.
"""

import logging

from utils.constants import MCP_SERVER_NAME

# Server tools
from .server import (
    get_server_configuration_status,
    test_storage_connection,
)

# Account tools
from .auth import (
    get_current_session,
    login,
    logout,
    register_user,
)

# Movie tools
from .movies import (
    add_movie,
    delete_movie,
    edit_movie,
    get_movie_details,
    get_recent_movies,
    list_genres,
    list_movies,
)

logger = logging.getLogger(f"{MCP_SERVER_NAME}.tools")

# Tools that never modify users or movies
READ_ONLY_TOOLS = [
    get_server_configuration_status,
    test_storage_connection,
    login,
    logout,
    get_current_session,
    list_movies,
    get_movie_details,
    get_recent_movies,
    list_genres,
]

# Tools that modify users or movies, left out in read-only mode
WRITE_TOOLS = [
    register_user,
    add_movie,
    edit_movie,
    delete_movie,
]

# List of all tools for easy registration
ALL_TOOLS = READ_ONLY_TOOLS + WRITE_TOOLS

ALL_TOOL_NAMES = {tool.__name__ for tool in ALL_TOOLS}


def get_tools(read_only_mode: bool = False, disabled_tools: set[str] | None = None) -> list:
    """Return the tools to register.

    Write tools are dropped in read-only mode, and any tool named in
    disabled_tools is dropped as well.
    """
    tools = READ_ONLY_TOOLS if read_only_mode else ALL_TOOLS
    disabled_tools = disabled_tools or set()
    selected = [tool for tool in tools if tool.__name__ not in disabled_tools]
    if disabled_tools:
        logger.info(f"Disabled tools: {', '.join(sorted(disabled_tools))}")
    return selected


__all__ = [
    # Individual tools
    "get_server_configuration_status",
    "test_storage_connection",
    "login",
    "logout",
    "register_user",
    "get_current_session",
    "list_movies",
    "get_movie_details",
    "get_recent_movies",
    "list_genres",
    "add_movie",
    "edit_movie",
    "delete_movie",
    # Convenience
    "ALL_TOOLS",
    "ALL_TOOL_NAMES",
    "READ_ONLY_TOOLS",
    "WRITE_TOOLS",
    "get_tools",
]
