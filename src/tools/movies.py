"""
Tools for the movie catalog.

This module contains tools for listing, searching, viewing, adding, editing and deleting movies.
All of them need an active session.
"""

import logging
from dataclasses import asdict
from typing import Any

from mcp.server.fastmcp import Context

from store.errors import MovieNotFound
from store.models import Movie
from utils.constants import DEFAULT_RECENT_LIMIT, MCP_SERVER_NAME
from utils.context import get_catalog_store, require_session

logger = logging.getLogger(f"{MCP_SERVER_NAME}.tools.movies")


def _movie_view(movie: Movie) -> dict[str, Any]:
    view = asdict(movie)
    view["display_image_url"] = movie.image_or_fallback()
    return view


def list_movies(ctx: Context, query: str = "", genre: str = "") -> list[dict[str, Any]]:
    """List movies, optionally filtered.
    The query is matched case-insensitively against title, description and director.
    The genre must match exactly. Empty values do not filter."""
    require_session(ctx)
    movies = get_catalog_store(ctx).filter_movies(query, genre)
    return [_movie_view(movie) for movie in movies]


def get_movie_details(ctx: Context, movie_id: int) -> dict[str, Any]:
    """Get all the details of a movie by its id."""
    require_session(ctx)
    movie = get_catalog_store(ctx).get_movie(movie_id)
    if movie is None:
        raise MovieNotFound(movie_id)
    return _movie_view(movie)


def get_recent_movies(ctx: Context, limit: int = DEFAULT_RECENT_LIMIT) -> list[dict[str, Any]]:
    """List the most recently added movies, newest first."""
    require_session(ctx)
    return [_movie_view(movie) for movie in get_catalog_store(ctx).recent_movies(limit)]


def list_genres(ctx: Context) -> list[str]:
    """List the genres present in the catalog."""
    require_session(ctx)
    return get_catalog_store(ctx).genres()


def add_movie(
    ctx: Context,
    title: str,
    genre: str,
    director: str,
    year: int,
    rating: float,
    description: str,
    image_url: str | None = None,
) -> dict[str, Any]:
    """Add a movie to the catalog. Every field except the image URL is required.
    Returns the stored movie with its new id."""
    session = require_session(ctx)
    store = get_catalog_store(ctx)
    try:
        movie = store.create_movie(title, genre, director, year, rating, description, image_url)
    except ValueError as e:
        logger.error(f"Error adding movie {title!r}: {e}")
        raise
    logger.info(f"{session.username} added movie {movie.id}")
    return _movie_view(movie)


def edit_movie(
    ctx: Context,
    movie_id: int,
    title: str,
    genre: str,
    director: str,
    year: int,
    rating: float,
    description: str,
    image_url: str | None = None,
) -> dict[str, Any]:
    """Replace every field of an existing movie. The id does not change."""
    session = require_session(ctx)
    store = get_catalog_store(ctx)
    try:
        movie = store.update_movie(
            movie_id, title, genre, director, year, rating, description, image_url
        )
    except ValueError as e:
        logger.error(f"Error editing movie {movie_id}: {e}")
        raise
    if movie is None:
        raise MovieNotFound(movie_id)
    logger.info(f"{session.username} edited movie {movie_id}")
    return _movie_view(movie)


def delete_movie(ctx: Context, movie_id: int) -> bool:
    """Delete a movie by its id. Returns True on success."""
    session = require_session(ctx)
    if not get_catalog_store(ctx).delete_movie(movie_id):
        raise MovieNotFound(movie_id)
    logger.info(f"{session.username} deleted movie {movie_id}")
    return True
