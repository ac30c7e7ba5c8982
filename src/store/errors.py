"""
Error types raised by the catalog store.

Everything a caller can see derives from CatalogError, which is a ValueError so
that tool handlers report it to the MCP client the same way as other bad input.
ParseFailure never leaves the store: reads absorb it and return a fallback.
"""


class CatalogError(ValueError):
    """Base class for errors surfaced by the catalog store."""


class ParseFailure(CatalogError):
    """Persisted text is not valid JSON or does not have the expected shape."""


class ValidationFailure(CatalogError):
    """Caller supplied fields are missing or invalid."""


class UsernameTaken(CatalogError):
    """A user with the requested username already exists."""

    def __init__(self, username: str):
        super().__init__(f"Username '{username}' already exists")
        self.username = username


class MovieNotFound(CatalogError):
    """No movie with the requested id exists."""

    def __init__(self, movie_id: int):
        super().__init__(f"Movie {movie_id} not found")
        self.movie_id = movie_id
