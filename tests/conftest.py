"""
Shared fixtures and utilities for the movie catalog tests.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from mcp import ClientSession, StdioServerParameters, stdio_client

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"

# Add src to path for imports
sys.path.insert(0, str(SRC_DIR))

from store.backends import MemoryBackend
from store.catalog_store import CatalogStore
from utils.context import AppContext

# Tools we expect to be registered by the server
EXPECTED_TOOLS = {
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
}

# Default timeout (seconds) to guard against hangs while the server starts.
# Override with CATALOG_MCP_TEST_TIMEOUT if needed.
DEFAULT_TIMEOUT = int(os.getenv("CATALOG_MCP_TEST_TIMEOUT", "60"))

SAMPLE_MOVIE = {
    "title": "The Prestige",
    "genre": "Drama",
    "director": "Christopher Nolan",
    "year": 2006,
    "rating": 8.5,
    "description": "Two rival magicians.",
    "image_url": "https://example.com/prestige.jpg",
}


def _build_env(extra: dict[str, str] | None = None) -> dict[str, str]:
    """Build the environment passed to the test server process."""
    env = os.environ.copy()

    # Ensure the server module can be imported from the repo's src/ folder
    existing_path = env.get("PYTHONPATH")
    env["PYTHONPATH"] = (
        f"{SRC_DIR}{os.pathsep}{existing_path}" if existing_path else str(SRC_DIR)
    )

    # A fresh in-memory catalog for every server process
    env["CATALOG_MCP_STORAGE"] = "memory"
    # Force stdio transport for the test server to match stdio_client
    env["CATALOG_MCP_TRANSPORT"] = "stdio"
    env.pop("CATALOG_MCP_READ_ONLY_MODE", None)
    env.pop("CATALOG_MCP_DISABLED_TOOLS", None)
    # Ensure unbuffered output to avoid stdout/stderr buffering surprises
    env.setdefault("PYTHONUNBUFFERED", "1")
    if extra:
        env.update(extra)
    return env


@asynccontextmanager
async def create_mcp_session(
    extra_env: dict[str, str] | None = None,
) -> AsyncIterator[ClientSession]:
    """Create a fresh MCP client session connected to the server over stdio."""
    params = StdioServerParameters(
        command=sys.executable,
        args=["-m", "mcp_server"],
        env=_build_env(extra_env),
    )

    async with asyncio.timeout(DEFAULT_TIMEOUT):
        async with stdio_client(params) as (read_stream, write_stream):
            async with ClientSession(read_stream, write_stream) as session:
                await session.initialize()
                yield session


def extract_payload(response: Any) -> Any:
    """Extract a usable payload from a tool response.

    MCP tool responses can return data in different formats:
    - A single content block with JSON-encoded data (dict, list, etc.)
    - Multiple content blocks, one per list item (for list returns)

    This function handles both cases.
    """
    content = getattr(response, "content", None) or []
    if not content:
        return None

    # If there are multiple content blocks, collect them all as a list
    # (each item in a list return may be a separate content block)
    if len(content) > 1:
        items = []
        for block in content:
            text = getattr(block, "text", None)
            if text is not None:
                try:
                    items.append(json.loads(text))
                except json.JSONDecodeError:
                    items.append(text)
        return items if items else None

    # Single content block - try to parse as JSON
    first = content[0]
    raw = getattr(first, "text", None)
    if raw is None and hasattr(first, "data"):
        raw = first.data

    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw

    return raw


def ensure_list(value: Any) -> list[Any]:
    """Ensure the value is a list.

    MCP can return single-item lists as just the item (not wrapped in a list).
    This helper wraps single non-list values in a list for consistent handling.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def make_context(store: CatalogStore | None, read_only_mode: bool = False) -> Any:
    """Build a stand-in for the MCP request context the tools receive."""
    app_context = AppContext(store=store, read_only_mode=read_only_mode)
    return SimpleNamespace(request_context=SimpleNamespace(lifespan_context=app_context))


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> CatalogStore:
    """A catalog store over an empty memory backend, seeded with the defaults."""
    catalog = CatalogStore(backend)
    catalog.seed_if_needed()
    return catalog


@pytest.fixture
def ctx(store: CatalogStore) -> Any:
    return make_context(store)


@pytest.fixture
def logged_in_ctx(store: CatalogStore) -> Any:
    """A context whose store has the admin user logged in."""
    assert store.login("admin", "admin123") is not None
    return make_context(store)
