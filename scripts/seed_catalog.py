#!/usr/bin/env python3
"""
Seed script for the movie catalog storage.

This script:
1. Opens the storage backend configured through environment variables
2. Optionally wipes the users, session and movies collections (--reset)
3. Installs the default users and movies where a collection is missing
4. Prints the state of every collection

Usage:
    python scripts/seed_catalog.py [--reset]

Environment variables:
    CATALOG_MCP_STORAGE - memory, file (default) or couchbase
    CATALOG_MCP_STORAGE_PATH - State file for the file backend
    CB_CONNECTION_STRING, CB_USERNAME, CB_PASSWORD, CB_BUCKET_NAME - Couchbase backend
    CB_SCOPE_NAME, CB_COLLECTION_NAME - Optional, default to _default
"""

import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from store.backends import open_backend
from store.catalog_store import CatalogStore
from utils.constants import COLLECTION_KEYS, DEFAULT_STORAGE, DEFAULT_STORAGE_PATH


def settings_from_env() -> dict:
    """Build backend settings from the environment."""
    return {
        "storage": os.getenv("CATALOG_MCP_STORAGE", DEFAULT_STORAGE),
        "storage_path": os.getenv("CATALOG_MCP_STORAGE_PATH", DEFAULT_STORAGE_PATH),
        "connection_string": os.getenv("CB_CONNECTION_STRING"),
        "username": os.getenv("CB_USERNAME"),
        "password": os.getenv("CB_PASSWORD"),
        "ca_cert_path": os.getenv("CB_CA_CERT_PATH"),
        "bucket_name": os.getenv("CB_BUCKET_NAME"),
        "scope_name": os.getenv("CB_SCOPE_NAME"),
        "collection_name": os.getenv("CB_COLLECTION_NAME"),
    }


def main() -> int:
    """Main entry point."""
    reset = "--reset" in sys.argv[1:]
    settings = settings_from_env()
    print(f"Opening {settings['storage']} storage...")

    try:
        backend = open_backend(settings)
    except Exception as e:
        print(f"\nError: {e}")
        return 1

    try:
        store = CatalogStore(backend)

        if reset:
            print("\n1. Removing existing collections...")
            for key in COLLECTION_KEYS:
                backend.remove_item(key)
                print(f"  - Removed {key}")

        print("\n2. Seeding missing collections...")
        store.seed_if_needed()

        print("\n3. Collection status:")
        for key, status in store.inspect().items():
            print(f"  - {key}: {status['status']} ({status['count']} records)")

        print("\n✓ Catalog storage ready!")
        return 0
    except Exception as e:
        print(f"\nError: {e}")
        return 1
    finally:
        backend.close()


if __name__ == "__main__":
    sys.exit(main())
