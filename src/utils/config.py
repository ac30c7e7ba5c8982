import logging
from pathlib import Path
from typing import Any

from .constants import (
    ALLOWED_STORAGE_BACKENDS,
    DEFAULT_COLLECTION_NAME,
    DEFAULT_SCOPE_NAME,
    MCP_SERVER_NAME,
)

logger = logging.getLogger(f"{MCP_SERVER_NAME}.utils.config")


config = {}

def set_settings(settings: dict) -> None:
    """Set settings in global variable."""
    global config
    config = settings

def get_settings() -> dict:
    """Get settings from global variable."""
    return config


def validate_required_param(value: Any, param_name: str) -> None:
    """Raise ValueError if a required parameter is missing or blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{param_name} is required")


def validate_storage_settings(settings: dict[str, Any]) -> None:
    """Validate that the settings describe a usable storage backend.

    The Couchbase backend needs connection credentials and a bucket; the file
    backend needs a path. The memory backend needs nothing.
    """
    storage = settings.get("storage")
    if storage not in ALLOWED_STORAGE_BACKENDS:
        raise ValueError(
            f"Unknown storage backend '{storage}'. "
            f"Expected one of: {', '.join(ALLOWED_STORAGE_BACKENDS)}"
        )
    if storage == "file":
        validate_required_param(settings.get("storage_path"), "storage_path")
    elif storage == "couchbase":
        required = ["connection_string", "username", "password", "bucket_name"]
        missing = [key for key in required if not settings.get(key)]
        if missing:
            raise ValueError(
                f"Missing required Couchbase settings: {', '.join(missing)}"
            )
        settings["scope_name"] = settings.get("scope_name") or DEFAULT_SCOPE_NAME
        settings["collection_name"] = (
            settings.get("collection_name") or DEFAULT_COLLECTION_NAME
        )


def _read_disabled_tools_file(path: Path) -> list[str]:
    """Read tool names from a file, one per line, skipping blanks and comments."""
    names = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            names.append(stripped)
    return names


def parse_disabled_tools(value: str | None, valid_tool_names: set[str]) -> set[str]:
    """Parse the disabled tools setting into a set of known tool names.

    The value is either a path to an existing file listing one tool per line,
    or a comma-separated list of tool names. Unknown names are ignored.
    """
    if value is None or not value.strip():
        return set()

    candidate = Path(value.strip())
    if candidate.is_file():
        logger.info(f"Reading disabled tools from file: {candidate}")
        names = _read_disabled_tools_file(candidate)
    else:
        names = [name.strip() for name in value.split(",")]

    disabled = set()
    for name in names:
        if not name:
            continue
        if name in valid_tool_names:
            disabled.add(name)
        else:
            logger.warning(f"Ignoring unknown tool name in disabled tools: {name!r}")
    return disabled
