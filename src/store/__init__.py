"""
Store module for the movie catalog.

Provides the catalog store, its record types and the key-value backends it persists to.
"""

from store.backends import CouchbaseBackend, FileBackend, KeyValueBackend, MemoryBackend, open_backend
from store.catalog_store import CatalogStore
from store.errors import CatalogError, MovieNotFound, ParseFailure, UsernameTaken, ValidationFailure
from store.models import Movie, Session, User

__all__ = [
    "CatalogStore",
    "KeyValueBackend",
    "MemoryBackend",
    "FileBackend",
    "CouchbaseBackend",
    "open_backend",
    "CatalogError",
    "MovieNotFound",
    "ParseFailure",
    "UsernameTaken",
    "ValidationFailure",
    "Movie",
    "Session",
    "User",
]
