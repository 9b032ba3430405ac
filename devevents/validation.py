"""Field validation for events and bookings.

Each check either returns the normalized value or raises one of the
``ValidationError`` subclasses from devevents.errors. Validation runs before
any database interaction, so invalid data never reaches the session.
"""
import re
import uuid
from datetime import date
from typing import Any, Mapping, Optional

from devevents.errors import (
    EmptyCollection,
    InvalidFormat,
    InvalidReference,
    RequiredFieldMissing,
)

SLUG_MAX_LENGTH = 100

EVENT_STRING_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)
EVENT_LIST_FIELDS = ("agenda", "tags")

# Column widths in devevents.models; text columns have no limit
FIELD_MAX_LENGTHS = {
    "title": 255,
    "image": 500,
    "venue": 255,
    "location": 255,
    "mode": 50,
    "audience": 255,
    "organizer": 255,
    "email": 320,
}

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_SLUG_PATTERN = re.compile(r"[a-z0-9-]{1,100}")
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_PATTERN = re.compile(r"([01][0-9]|2[0-3]):[0-5][0-9]")
_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def slugify(title: str) -> str:
    """Derive a URL-safe slug: ``"Event: 2025 @ #Tech!"`` -> ``"event-2025-tech"``."""
    slug = _NON_SLUG_CHARS.sub("-", title.strip().lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH].rstrip("-")


def is_valid_slug(value: Any) -> bool:
    return isinstance(value, str) and _SLUG_PATTERN.fullmatch(value) is not None


def check_length(name: str, value: str) -> str:
    limit = FIELD_MAX_LENGTHS.get(name)
    if limit is not None and len(value) > limit:
        raise InvalidFormat(f"Field '{name}' must be at most {limit} characters.", field=name)
    return value


def require_string(fields: Mapping[str, Any], name: str) -> str:
    value = fields.get(name)
    if value is None:
        raise RequiredFieldMissing(name)
    if not isinstance(value, str):
        raise InvalidFormat(f"Field '{name}' must be a string.", field=name)
    value = value.strip()
    if not value:
        raise RequiredFieldMissing(name)
    return check_length(name, value)


def check_date(value: str) -> str:
    if not _DATE_PATTERN.fullmatch(value):
        raise InvalidFormat("Date must be in YYYY-MM-DD format.", field="date")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise InvalidFormat(f"'{value}' is not a valid calendar date.", field="date")
    return value


def check_time(value: str) -> str:
    if not _TIME_PATTERN.fullmatch(value):
        raise InvalidFormat("Time must be in HH:MM 24-hour format.", field="time")
    return value


def require_string_list(fields: Mapping[str, Any], name: str) -> list[str]:
    value = fields.get(name)
    if value is None:
        raise RequiredFieldMissing(name)
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise InvalidFormat(f"Field '{name}' must be a list of strings.", field=name)
    if not value:
        raise EmptyCollection(name)
    items = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise InvalidFormat(f"Field '{name}' must not contain blank items.", field=name)
        items.append(item.strip())
    return items


def validate_event_fields(fields: Mapping[str, Any], partial: bool = False) -> dict[str, Any]:
    """Validate and normalize event fields.

    With ``partial=True`` only the keys present in ``fields`` are checked, which
    is how updates validate changed fields. Unknown keys are ignored.
    """
    cleaned: dict[str, Any] = {}
    for name in EVENT_STRING_FIELDS:
        if partial and name not in fields:
            continue
        cleaned[name] = require_string(fields, name)
    for name in EVENT_LIST_FIELDS:
        if partial and name not in fields:
            continue
        cleaned[name] = require_string_list(fields, name)

    if "date" in cleaned:
        check_date(cleaned["date"])
    if "time" in cleaned:
        check_time(cleaned["time"])
    if "title" in cleaned and not slugify(cleaned["title"]):
        raise InvalidFormat("Title must contain at least one letter or digit.", field="title")
    return cleaned


def normalize_email(value: Optional[Any]) -> str:
    """Trim and lowercase an email, then check its shape."""
    if value is None:
        raise RequiredFieldMissing("email")
    if not isinstance(value, str):
        raise InvalidFormat("Please provide a valid email address.", field="email")
    email = value.strip().lower()
    if not email:
        raise RequiredFieldMissing("email")
    check_length("email", email)
    if not _EMAIL_PATTERN.fullmatch(email):
        raise InvalidFormat("Please provide a valid email address.", field="email")
    return email


def parse_event_id(value: Optional[Any]) -> str:
    """Return the canonical string form of an event identifier."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RequiredFieldMissing("event_id")
    try:
        return str(uuid.UUID(str(value).strip()))
    except ValueError:
        raise InvalidReference("Event ID is not a valid identifier.", field="event_id")
