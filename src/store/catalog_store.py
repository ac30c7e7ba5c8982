"""
Catalog store over a string-keyed backend.

This module owns the three persisted collections:
- Users: registered accounts
- Session: the identity currently logged in, absent when nobody is
- Movies: the catalog itself

Each collection lives under its own key as JSON text and is rewritten whole on
every save. Reads never raise on bad data: a missing key, a JSON null, text
that does not parse or records with the wrong shape all yield the fallback.
"""

import json
import logging
import random
import time
from threading import RLock
from typing import Any, Callable, Optional

from store.backends import KeyValueBackend
from store.errors import ParseFailure, UsernameTaken
from store.models import Movie, Session, User
from store.validation import validate_movie_fields, validate_registration
from utils.constants import (
    DEFAULT_RECENT_LIMIT,
    MCP_SERVER_NAME,
    MOVIES_KEY,
    SESSION_KEY,
    USERS_KEY,
)

logger = logging.getLogger(f"{MCP_SERVER_NAME}.store.catalog")

DEFAULT_USERS = [
    User(name="Admin", username="admin", password="admin123"),
    User(name="Usuario", username="usuario", password="1234"),
]

DEFAULT_MOVIES = [
    {
        "title": "Origen",
        "genre": "Ciencia Ficción",
        "director": "Christopher Nolan",
        "year": 2010,
        "rating": 8.8,
        "description": "Robo de secretos en sueños.",
        "image_url": "https://www.imdb.com/es/title/tt6751668/mediaviewer/rm3194916865/?ref_=tt_ov_i",
    },
    {
        "title": "Interestellar",
        "genre": "Drama",
        "director": "Bong Joon-ho",
        "year": 2019,
        "rating": 8.6,
        "description": "Una familia pobre se infiltra en otra.",
        "image_url": "https://m.media-amazon.com/images/I/91kFYg4fX3L._AC_SL1500_.jpg",
    },
]


def _parse_list(parser: Callable[[Any], Any]) -> Callable[[Any], list]:
    def parse(value: Any) -> list:
        if not isinstance(value, list):
            raise ParseFailure(f"Expected a list, got {type(value).__name__}")
        return [parser(item) for item in value]

    return parse


_parse_users = _parse_list(User.from_record)
_parse_movies = _parse_list(Movie.from_record)


class CatalogStore:
    """Users, session and movies persisted in a key-value backend."""

    def __init__(self, backend: KeyValueBackend):
        self._backend = backend
        self._lock = RLock()
        self._last_id = 0

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    # Raw access

    def _load(self, key: str, parser: Optional[Callable[[Any], Any]] = None) -> tuple[str, Any]:
        """Load a key and report how it went: ("ok", value), ("absent", None) or ("corrupt", None)."""
        try:
            raw = self._backend.get_item(key)
            if raw is None:
                return "absent", None
            value = json.loads(raw)
            if value is None:
                return "absent", None
            return "ok", parser(value) if parser else value
        except (json.JSONDecodeError, ParseFailure) as e:
            logger.warning(f"Ignoring unreadable data under {key}: {e}")
            return "corrupt", None

    def read(self, key: str, fallback: Any = None, parser: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        Deserialize the JSON text stored under a key.

        Args:
            key: Storage key to read
            fallback: Value returned when the key is missing or its content is unusable
            parser: Optional callable turning the decoded JSON into typed records;
                it signals a shape mismatch by raising ParseFailure

        Returns:
            The decoded (and parsed) value, or the fallback
        """
        with self._lock:
            status, value = self._load(key, parser)
            return value if status == "ok" else fallback

    def write(self, key: str, value: Any) -> None:
        """Serialize a value to JSON and store it under a key, replacing what was there."""
        with self._lock:
            self._backend.set_item(key, json.dumps(value, ensure_ascii=False))

    def _is_stored(self, key: str) -> bool:
        """Whether a key holds a non-empty value. Content the backend cannot decode counts as stored."""
        try:
            return bool(self._backend.get_item(key))
        except ParseFailure:
            return True

    def seed_if_needed(self) -> None:
        """Install the default users and movies for collections that were never stored."""
        with self._lock:
            if not self._is_stored(USERS_KEY):
                logger.info("Seeding default users")
                self.save_users(DEFAULT_USERS)
            if not self._is_stored(MOVIES_KEY):
                logger.info("Seeding default movies")
                movies: list[Movie] = []
                for fields in DEFAULT_MOVIES:
                    movies.append(Movie(id=self.generate_id(movies), **fields))
                self.save_movies(movies)

    def generate_id(self, existing: Optional[list[Movie]] = None) -> int:
        """
        Return a new movie id.

        Ids are the current time in milliseconds plus a random offset below
        1000, bumped when needed so that each one is greater than every id this
        store generated or holds. They therefore also sort by creation time.

        Args:
            existing: Movies already loaded by the caller; read from storage when omitted
        """
        with self._lock:
            if existing is None:
                existing = self.get_movies()
            candidate = int(time.time() * 1000) + random.randrange(1000)
            floor = max([self._last_id] + [movie.id for movie in existing])
            if candidate <= floor:
                candidate = floor + 1
            self._last_id = candidate
            return candidate

    # Collections

    def get_users(self) -> list[User]:
        return self.read(USERS_KEY, [], _parse_users)

    def save_users(self, users: list[User]) -> None:
        self.write(USERS_KEY, [user.to_record() for user in users])

    def get_session(self) -> Optional[Session]:
        return self.read(SESSION_KEY, None, Session.from_record)

    def save_session(self, session: Optional[Session]) -> None:
        """Persist the session, or delete the session key when given None."""
        with self._lock:
            if session:
                self.write(SESSION_KEY, session.to_record())
            else:
                self._backend.remove_item(SESSION_KEY)

    def get_movies(self) -> list[Movie]:
        return self.read(MOVIES_KEY, [], _parse_movies)

    def save_movies(self, movies: list[Movie]) -> None:
        self.write(MOVIES_KEY, [movie.to_record() for movie in movies])

    # Accounts

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the first user whose username and password both match exactly."""
        for user in self.get_users():
            if user.username == username and user.password == password:
                return user
        return None

    def login(self, username: str, password: str) -> Optional[Session]:
        """Authenticate and make the user the active session. Returns None on bad credentials."""
        with self._lock:
            user = self.authenticate((username or "").strip(), password or "")
            if user is None:
                logger.info(f"Rejected login for {username!r}")
                return None
            session = Session.for_user(user)
            self.save_session(session)
            logger.info(f"User {user.username} logged in")
            return session

    def logout(self) -> None:
        self.save_session(None)

    def register(
        self,
        name: str,
        username: str,
        password: str,
        confirm: str,
        email: Optional[str] = None,
    ) -> User:
        """
        Create an account.

        Raises:
            ValidationFailure: username shorter than 4, password shorter than 6
                or confirmation mismatch
            UsernameTaken: the username is already registered
        """
        fields = validate_registration(name, username, password, confirm, email)
        with self._lock:
            users = self.get_users()
            if any(user.username == fields["username"] for user in users):
                raise UsernameTaken(fields["username"])
            user = User(**fields)
            users.append(user)
            self.save_users(users)
            logger.info(f"Registered user {user.username}")
            return user

    # Movies

    def get_movie(self, movie_id: int) -> Optional[Movie]:
        for movie in self.get_movies():
            if movie.id == movie_id:
                return movie
        return None

    def filter_movies(self, query: str = "", genre: str = "") -> list[Movie]:
        """Movies matching the query and genre, in stored order."""
        return [movie for movie in self.get_movies() if movie.matches(query, genre)]

    def genres(self) -> list[str]:
        """Distinct genres in the order they first appear."""
        return list(dict.fromkeys(movie.genre for movie in self.get_movies()))

    def create_movie(
        self,
        title: str,
        genre: str,
        director: str,
        year: Any,
        rating: Any,
        description: str,
        image_url: Optional[str] = None,
    ) -> Movie:
        fields = validate_movie_fields(title, genre, director, year, rating, description, image_url)
        with self._lock:
            movies = self.get_movies()
            movie = Movie(id=self.generate_id(movies), **fields)
            movies.append(movie)
            self.save_movies(movies)
            logger.info(f"Created movie {movie.id} ({movie.title})")
            return movie

    def update_movie(
        self,
        movie_id: int,
        title: str,
        genre: str,
        director: str,
        year: Any,
        rating: Any,
        description: str,
        image_url: Optional[str] = None,
    ) -> Optional[Movie]:
        """Replace a movie in place, keeping its id and position. Returns None if the id is unknown."""
        fields = validate_movie_fields(title, genre, director, year, rating, description, image_url)
        with self._lock:
            movies = self.get_movies()
            for index, movie in enumerate(movies):
                if movie.id == movie_id:
                    movies[index] = Movie(id=movie_id, **fields)
                    self.save_movies(movies)
                    logger.info(f"Updated movie {movie_id}")
                    return movies[index]
            logger.info(f"Cannot update unknown movie {movie_id}")
            return None

    def delete_movie(self, movie_id: int) -> bool:
        """Remove a movie by id. Returns False, without writing, if the id is unknown."""
        with self._lock:
            movies = self.get_movies()
            remaining = [movie for movie in movies if movie.id != movie_id]
            if len(remaining) == len(movies):
                logger.info(f"Cannot delete unknown movie {movie_id}")
                return False
            self.save_movies(remaining)
            logger.info(f"Deleted movie {movie_id}")
            return True

    def recent_movies(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[Movie]:
        """Most recently created movies first, at most `limit` of them."""
        if limit <= 0:
            return []
        return sorted(self.get_movies(), key=lambda movie: movie.id, reverse=True)[:limit]

    # Diagnostics

    def inspect(self) -> dict[str, dict[str, Any]]:
        """Report, per collection key, whether it is ok, absent or corrupt, and how many records it holds."""
        parsers = {
            USERS_KEY: _parse_users,
            SESSION_KEY: Session.from_record,
            MOVIES_KEY: _parse_movies,
        }
        report = {}
        with self._lock:
            for key, parser in parsers.items():
                status, value = self._load(key, parser)
                if isinstance(value, list):
                    count = len(value)
                else:
                    count = 1 if value is not None else 0
                report[key] = {"status": status, "count": count}
        return report
