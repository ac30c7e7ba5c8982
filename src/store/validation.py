"""
Presence checks for registration and movie forms.

Both helpers return the cleaned field values ready to be stored, or raise
ValidationFailure naming the first problem found.
"""

import math
import re
from typing import Any, Optional

from store.errors import ValidationFailure
from utils.constants import MIN_PASSWORD_LENGTH, MIN_USERNAME_LENGTH

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def validate_registration(
    name: Optional[str],
    username: Optional[str],
    password: Optional[str],
    confirm: Optional[str],
    email: Optional[str] = None,
) -> dict[str, Any]:
    """Check a registration form.

    Name, email and username are trimmed. The password is kept as typed.
    """
    username = _clean(username)
    password = password or ""
    confirm = confirm or ""

    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationFailure(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters"
        )
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailure(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if password != confirm:
        raise ValidationFailure("Passwords do not match")

    return {
        "name": _clean(name),
        "username": username,
        "password": password,
        "email": _clean(email) or None,
    }


def _to_year(value: Any) -> int:
    """Read the leading whole number of value, so "2010.5" and "2010abc" give 2010."""
    if isinstance(value, bool):
        raise ValidationFailure("Year must be a whole number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationFailure("Year must be a whole number")
        return int(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        raise ValidationFailure("Year must be a whole number")
    return int(match.group(1))


def _to_rating(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationFailure("Rating must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationFailure("Rating must be a number") from e


def validate_movie_fields(
    title: Optional[str],
    genre: Optional[str],
    director: Optional[str],
    year: Any,
    rating: Any,
    description: Optional[str],
    image_url: Optional[str] = None,
) -> dict[str, Any]:
    """Check a movie form. Every field but the image is required.

    A year or rating of zero counts as missing.
    """
    cleaned = {
        "title": _clean(title),
        "genre": genre or "",
        "director": _clean(director),
        "description": _clean(description),
    }
    missing = [field for field, value in cleaned.items() if not value]
    if year is None or year == "":
        missing.append("year")
    if rating is None or rating == "":
        missing.append("rating")
    if missing:
        raise ValidationFailure(f"Missing required fields: {', '.join(missing)}")

    cleaned["year"] = _to_year(year)
    cleaned["rating"] = _to_rating(rating)
    if not cleaned["year"] or not cleaned["rating"]:
        raise ValidationFailure("Year and rating must be non-zero")

    cleaned["image_url"] = _clean(image_url) or None
    return cleaned
