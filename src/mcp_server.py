"""
Movie Catalog MCP Server
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import click
from mcp.server.fastmcp import FastMCP

from store.backends import open_backend
from store.catalog_store import CatalogStore

# Import tools
from tools import ALL_TOOL_NAMES, get_tools

# Import utilities
from utils import (
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
    get_settings,
    parse_disabled_tools,
    set_settings,
)
from utils.constants import DEFAULT_COLLECTION_NAME, DEFAULT_SCOPE_NAME
from utils.context import AppContext

logger = logging.getLogger(MCP_SERVER_NAME)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Initialize the MCP server context, opening and seeding the catalog storage."""
    settings = get_settings()
    read_only_mode = settings.get("read_only_mode", DEFAULT_READ_ONLY_MODE)

    app_context = AppContext(read_only_mode=read_only_mode)
    try:
        # A storage failure here is not fatal: tools retry opening it on first use
        try:
            store = CatalogStore(open_backend(settings))
            store.seed_if_needed()
            app_context.store = store
            logger.info("Catalog storage opened and seeded")
        except Exception as e:
            logger.error(f"Could not open catalog storage at startup: {e}")

        yield app_context

    except Exception as e:
        logger.error(f"Error in app lifespan: {e}")
        raise
    finally:
        if app_context.store:
            app_context.store.backend.close()
        logger.info("Closing MCP server")


@click.command()
@click.option(
    "--storage",
    envvar="CATALOG_MCP_STORAGE",
    type=click.Choice(ALLOWED_STORAGE_BACKENDS),
    default=DEFAULT_STORAGE,
    help="Storage backend for the catalog (memory, file or couchbase). Default is file",
)
@click.option(
    "--storage-path",
    envvar="CATALOG_MCP_STORAGE_PATH",
    default=DEFAULT_STORAGE_PATH,
    help="Path of the JSON state file used by the file backend",
)
@click.option(
    "--connection-string",
    envvar="CB_CONNECTION_STRING",
    help="Couchbase connection string (required for the couchbase backend)",
)
@click.option(
    "--username",
    envvar="CB_USERNAME",
    help="Couchbase database user (required for the couchbase backend)",
)
@click.option(
    "--password",
    envvar="CB_PASSWORD",
    help="Couchbase database password (required for the couchbase backend)",
)
@click.option(
    "--ca-cert-path",
    envvar="CB_CA_CERT_PATH",
    default=None,
    help="Path to the server trust store (CA certificate) file.",
)
@click.option(
    "--bucket-name",
    envvar="CB_BUCKET_NAME",
    help="Couchbase bucket holding the catalog (required for the couchbase backend)",
)
@click.option(
    "--scope-name",
    envvar="CB_SCOPE_NAME",
    default=DEFAULT_SCOPE_NAME,
    help="Couchbase scope holding the catalog (default: _default)",
)
@click.option(
    "--collection-name",
    envvar="CB_COLLECTION_NAME",
    default=DEFAULT_COLLECTION_NAME,
    help="Couchbase collection holding the catalog (default: _default)",
)
@click.option(
    "--read-only-mode",
    envvar="CATALOG_MCP_READ_ONLY_MODE",
    type=bool,
    default=DEFAULT_READ_ONLY_MODE,
    help="Enable read-only mode. When True, tools that register users or change movies are not loaded.",
)
@click.option(
    "--disabled-tools",
    envvar="CATALOG_MCP_DISABLED_TOOLS",
    default=None,
    help="Tools to leave out, as a comma-separated list or a path to a file with one tool name per line.",
)
@click.option(
    "--transport",
    envvar="CATALOG_MCP_TRANSPORT",
    type=click.Choice(ALLOWED_TRANSPORTS),
    default=DEFAULT_TRANSPORT,
    help="Transport mode for the server (stdio, http or sse). Default is stdio",
)
@click.option(
    "--host",
    envvar="CATALOG_MCP_HOST",
    default=DEFAULT_HOST,
    help="Host to run the server on (default: 127.0.0.1)",
)
@click.option(
    "--port",
    envvar="CATALOG_MCP_PORT",
    default=DEFAULT_PORT,
    help="Port to run the server on (default: 8000)",
)
@click.option(
    "--log-level",
    envvar="CATALOG_MCP_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    help="Logging level (default: INFO)",
)
@click.version_option(package_name="movie-catalog-mcp")
@click.pass_context
def main(
    ctx,
    storage,
    storage_path,
    connection_string,
    username,
    password,
    ca_cert_path,
    bucket_name,
    scope_name,
    collection_name,
    read_only_mode,
    disabled_tools,
    transport,
    host,
    port,
    log_level,
):
    """Movie Catalog MCP Server"""
    # Configure logging
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Store configuration in context
    set_settings({
        "storage": storage,
        "storage_path": storage_path,
        "connection_string": connection_string,
        "username": username,
        "password": password,
        "ca_cert_path": ca_cert_path,
        "bucket_name": bucket_name,
        "scope_name": scope_name,
        "collection_name": collection_name,
        "read_only_mode": read_only_mode,
        "transport": transport,
        "host": host,
        "port": port,
    })

    # Map user-friendly transport names to SDK transport names
    sdk_transport = NETWORK_TRANSPORTS_SDK_MAPPING.get(transport, transport)

    # If the transport is network based, we need to pass the host and port to the MCP server
    config = (
        {
            "host": host,
            "port": port,
        }
        if transport in NETWORK_TRANSPORTS
        else {}
    )

    mcp = FastMCP(MCP_SERVER_NAME, lifespan=app_lifespan, **config)

    # Register the enabled tools
    disabled = parse_disabled_tools(disabled_tools, ALL_TOOL_NAMES)
    for tool in get_tools(read_only_mode, disabled):
        mcp.add_tool(tool)

    logger.info(f"Starting {MCP_SERVER_NAME} with {storage} storage over {transport}")

    # Run the server
    mcp.run(transport=sdk_transport)  # type: ignore


if __name__ == "__main__":
    main()
