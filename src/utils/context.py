import logging
from dataclasses import dataclass

from mcp.server.fastmcp import Context

from store.backends import open_backend
from store.catalog_store import CatalogStore
from store.models import Session
from utils.config import get_settings
from utils.constants import MCP_SERVER_NAME

logger = logging.getLogger(f"{MCP_SERVER_NAME}.utils.context")


@dataclass
class AppContext:
    """Context for the MCP server."""

    store: CatalogStore | None = None
    read_only_mode: bool = False


def _set_store_in_lifespan_context(ctx: Context) -> None:
    """Open the configured backend, seed it and keep the store in the lifespan context.
    If the backend cannot be opened, it will raise an exception.
    """
    try:
        store = CatalogStore(open_backend(get_settings()))
        store.seed_if_needed()
        ctx.request_context.lifespan_context.store = store
    except Exception as e:
        logger.error(
            f"Failed to open catalog storage: {e} \n Please check your storage settings"
        )
        raise


def get_catalog_store(ctx: Context) -> CatalogStore:
    """Return the catalog store from the lifespan context, opening it on first use."""
    app_context = ctx.request_context.lifespan_context
    if not app_context.store:
        _set_store_in_lifespan_context(ctx)
    return app_context.store


def require_session(ctx: Context) -> Session:
    """Return the active session, or raise ValueError when nobody is logged in.

    A session naming a user that no longer exists is cleared and treated as absent.
    """
    store = get_catalog_store(ctx)
    session = store.get_session()
    if session is None:
        raise ValueError("No active session. Log in first.")
    if not any(user.username == session.username for user in store.get_users()):
        logger.warning(f"Clearing session for unknown user {session.username}")
        store.logout()
        raise ValueError("No active session. Log in first.")
    return session
