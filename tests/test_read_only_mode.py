"""
Tests for the READ_ONLY_MODE functionality.

This module tests:
- Tool filtering based on the read_only_mode setting
- The get_tools() function behavior according to the truth table
- Verification that write tools are not loaded when read_only_mode=True
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from tools import (
    ALL_TOOLS,
    READ_ONLY_TOOLS,
    WRITE_TOOLS,
    get_tools,
)
from utils.constants import DEFAULT_READ_ONLY_MODE

# Write tool names that should be disabled when read_only_mode=True
WRITE_TOOL_NAMES = {
    "register_user",
    "add_movie",
    "edit_movie",
    "delete_movie",
}

# Read-only tool names that should always be available
READ_ONLY_TOOL_NAMES = {
    # Server tools (2)
    "get_server_configuration_status",
    "test_storage_connection",
    # Session tools (3)
    "login",
    "logout",
    "get_current_session",
    # Movie read tools (4)
    "list_movies",
    "get_movie_details",
    "get_recent_movies",
    "list_genres",
}


class TestToolCategories:
    """Tests for tool category definitions."""

    def test_read_only_tools_defined(self):
        """Verify READ_ONLY_TOOLS list is properly defined."""
        tool_names = {tool.__name__ for tool in READ_ONLY_TOOLS}
        assert tool_names == READ_ONLY_TOOL_NAMES

    def test_write_tools_defined(self):
        """Verify WRITE_TOOLS list is properly defined."""
        assert len(WRITE_TOOLS) == 4
        tool_names = {tool.__name__ for tool in WRITE_TOOLS}
        assert tool_names == WRITE_TOOL_NAMES

    def test_all_tools_is_union(self):
        """Verify ALL_TOOLS is the union of READ_ONLY_TOOLS and WRITE_TOOLS."""
        assert len(ALL_TOOLS) == len(READ_ONLY_TOOLS) + len(WRITE_TOOLS)
        all_tool_names = {tool.__name__ for tool in ALL_TOOLS}
        assert all_tool_names == READ_ONLY_TOOL_NAMES | WRITE_TOOL_NAMES

    def test_no_overlap_between_categories(self):
        """Verify there's no overlap between READ_ONLY_TOOLS and WRITE_TOOLS."""
        read_only_names = {tool.__name__ for tool in READ_ONLY_TOOLS}
        write_names = {tool.__name__ for tool in WRITE_TOOLS}
        overlap = read_only_names & write_names
        assert overlap == set(), f"Unexpected overlap: {overlap}"


class TestGetToolsTruthTable:
    """Tests for get_tools() function.

    Tool Loading Behavior:
    | READ_ONLY_MODE | Write Tools Loaded |
    |----------------|--------------------|
    | True           | No                 |
    | False          | Yes                |
    """

    def test_read_only_mode_true(self):
        """read_only_mode=True: No write tools."""
        tools = get_tools(read_only_mode=True)
        tool_names = {tool.__name__ for tool in tools}

        assert tool_names == READ_ONLY_TOOL_NAMES
        for write_name in WRITE_TOOL_NAMES:
            assert write_name not in tool_names

    def test_read_only_mode_false(self):
        """read_only_mode=False: All tools loaded including write tools."""
        tools = get_tools(read_only_mode=False)
        tool_names = {tool.__name__ for tool in tools}

        assert tool_names == READ_ONLY_TOOL_NAMES | WRITE_TOOL_NAMES

    def test_disabled_tools_removed(self):
        """Disabled tools are left out in either mode."""
        disabled = {"delete_movie", "login"}
        for read_only_mode in (True, False):
            tool_names = {tool.__name__ for tool in get_tools(read_only_mode, disabled)}
            assert not tool_names & disabled


class TestGetToolsDefaults:
    """Tests for get_tools() default parameter values."""

    def test_default_loads_write_tools(self):
        """The catalog is writable unless read-only mode is requested."""
        assert DEFAULT_READ_ONLY_MODE is False
        tool_names = {tool.__name__ for tool in get_tools()}
        assert WRITE_TOOL_NAMES <= tool_names
