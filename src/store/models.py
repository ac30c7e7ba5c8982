"""
Record types for the three catalog collections.

Each type knows how to convert to and from its persisted record, whose field
names are the ones the stored JSON has always used (nombre, usuario, titulo...).
Any shape mismatch while loading a record raises ParseFailure.
"""

from dataclasses import dataclass
from typing import Any, Optional

from store.errors import ParseFailure
from utils.constants import FALLBACK_IMAGE


def _require(record: Any, key: str, kind: type | tuple[type, ...]) -> Any:
    """Return record[key] if present with the expected type, else raise ParseFailure."""
    if not isinstance(record, dict):
        raise ParseFailure(f"Expected an object, got {type(record).__name__}")
    if key not in record:
        raise ParseFailure(f"Missing field '{key}'")
    value = record[key]
    # bool is a subclass of int but never a valid number here
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ParseFailure(f"Field '{key}' has unexpected type {type(value).__name__}")
    return value


def _optional_str(record: dict, key: str) -> Optional[str]:
    value = record.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ParseFailure(f"Field '{key}' has unexpected type {type(value).__name__}")
    return value


@dataclass
class User:
    """A registered account. Passwords are stored as given."""

    name: str
    username: str
    password: str
    email: Optional[str] = None

    def __post_init__(self):
        # an empty email is stored as no email
        self.email = self.email or None

    @classmethod
    def from_record(cls, record: Any) -> "User":
        return cls(
            name=_require(record, "nombre", str),
            username=_require(record, "usuario", str),
            password=_require(record, "password", str),
            email=_optional_str(record, "email"),
        )

    def to_record(self) -> dict[str, Any]:
        record = {
            "nombre": self.name,
            "usuario": self.username,
            "password": self.password,
        }
        if self.email:
            record["email"] = self.email
        return record

    def public_view(self) -> dict[str, Any]:
        """The user without its password."""
        return {"name": self.name, "username": self.username, "email": self.email}


@dataclass
class Session:
    """The identity currently logged in."""

    username: str
    name: str

    @classmethod
    def from_record(cls, record: Any) -> "Session":
        return cls(
            username=_require(record, "usuario", str),
            name=_require(record, "nombre", str),
        )

    @classmethod
    def for_user(cls, user: User) -> "Session":
        return cls(username=user.username, name=user.name)

    def to_record(self) -> dict[str, Any]:
        return {"usuario": self.username, "nombre": self.name}


@dataclass
class Movie:
    id: int
    title: str
    genre: str
    director: str
    year: int
    rating: float
    description: str
    image_url: Optional[str] = None

    def __post_init__(self):
        self.image_url = self.image_url or None

    @classmethod
    def from_record(cls, record: Any) -> "Movie":
        return cls(
            id=_require(record, "id", int),
            title=_require(record, "titulo", str),
            genre=_require(record, "genero", str),
            director=_require(record, "director", str),
            year=_require(record, "ano", int),
            rating=float(_require(record, "calificacion", (int, float))),
            description=_require(record, "descripcion", str),
            image_url=_optional_str(record, "imagen"),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "titulo": self.title,
            "genero": self.genre,
            "director": self.director,
            "ano": self.year,
            "calificacion": self.rating,
            "descripcion": self.description,
            "imagen": self.image_url or "",
        }

    def image_or_fallback(self) -> str:
        """Image URL to display, or the placeholder when none was given."""
        return self.image_url or FALLBACK_IMAGE

    def matches(self, query: str = "", genre: str = "") -> bool:
        """Check the movie against a free text query and an exact genre.

        An empty genre or query matches everything. The query is trimmed and
        compared case-insensitively against title, description and director.
        """
        if genre and self.genre != genre:
            return False
        q = (query or "").strip().lower()
        if not q:
            return True
        return (
            q in self.title.lower()
            or q in self.description.lower()
            or q in self.director.lower()
        )
