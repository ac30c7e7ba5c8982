"""
Tools for accounts and the login session.

This module contains tools for logging in and out, registering a user and reading the current session.
"""

import logging
from typing import Any

from mcp.server.fastmcp import Context

from utils.constants import MCP_SERVER_NAME
from utils.context import get_catalog_store

logger = logging.getLogger(f"{MCP_SERVER_NAME}.tools.auth")


def login(ctx: Context, username: str, password: str) -> dict[str, Any]:
    """Log in with a username and password. The user becomes the active session.
    Usernames and passwords are case-sensitive."""
    store = get_catalog_store(ctx)
    session = store.login(username, password)
    if session is None:
        raise ValueError("Invalid username or password")
    return {
        "status": "success",
        "session": {"username": session.username, "name": session.name},
    }


def logout(ctx: Context) -> dict[str, Any]:
    """Log out the active session, if any."""
    store = get_catalog_store(ctx)
    store.logout()
    logger.info("Session cleared")
    return {"status": "success", "message": "Logged out"}


def register_user(
    ctx: Context,
    name: str,
    username: str,
    password: str,
    confirm_password: str,
    email: str | None = None,
) -> dict[str, Any]:
    """Create an account. The username needs at least 4 characters, the password
    at least 6, and the confirmation must repeat the password.
    The new user still has to log in afterwards."""
    store = get_catalog_store(ctx)
    try:
        user = store.register(name, username, password, confirm_password, email)
    except ValueError as e:
        logger.error(f"Registration failed for {username!r}: {e}")
        raise
    return {
        "status": "success",
        "message": "Account created. Please log in.",
        "user": user.public_view(),
    }


def get_current_session(ctx: Context) -> dict[str, Any]:
    """Return who is logged in, if anyone."""
    session = get_catalog_store(ctx).get_session()
    if session is None:
        return {"logged_in": False}
    return {"logged_in": True, "username": session.username, "name": session.name}
