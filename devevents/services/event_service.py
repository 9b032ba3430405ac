"""Event service — validation, slug derivation and persistence for events.

- Fields are validated before the session is touched
- Slug is derived from the title once, at creation, and never recomputed
- Slug uniqueness is enforced by the unique index; violations become DuplicateKey
- Deleting an event does not touch its bookings
"""
import logging
from typing import Any, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devevents.errors import DuplicateKey, NotFound
from devevents.models.event import Event, utcnow
from devevents.validation import slugify, validate_event_fields

logger = logging.getLogger(__name__)


def _commit_or_duplicate(db: Session, slug: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey(f"An event with slug '{slug}' already exists.", field="slug")


def create_event(db: Session, fields: Mapping[str, Any]) -> Event:
    """Validate fields, derive the slug and insert a new event."""
    cleaned = validate_event_fields(fields)
    cleaned["slug"] = slugify(cleaned["title"])

    now = utcnow()
    event = Event(**cleaned, created_at=now, updated_at=now)
    db.add(event)
    _commit_or_duplicate(db, cleaned["slug"])
    db.refresh(event)
    logger.info("Created event '%s' (%s) with slug %s", event.title, event.event_id, event.slug)
    return event


def find_event_by_slug(db: Session, slug: str) -> Event:
    """Return the event with this slug or raise NotFound."""
    event = db.query(Event).filter(Event.slug == slug).first()
    if not event:
        raise NotFound("Event not found.")
    return event


def find_event_by_id(db: Session, event_id: str) -> Optional[Event]:
    return db.query(Event).filter(Event.event_id == event_id).first()


def list_events(db: Session) -> list[Event]:
    return db.query(Event).order_by(Event.created_at.desc()).all()


def update_event(db: Session, event: Event, fields: Mapping[str, Any]) -> Event:
    """Apply a partial update. Only supplied fields are validated; slug stays frozen."""
    cleaned = validate_event_fields(fields, partial=True)
    for field, value in cleaned.items():
        setattr(event, field, value)
    event.updated_at = utcnow()
    _commit_or_duplicate(db, event.slug)
    db.refresh(event)
    logger.info("Updated event %s (fields: %s)", event.event_id, ", ".join(sorted(cleaned)) or "none")
    return event


def delete_event(db: Session, event: Event) -> None:
    """Remove an event. Bookings referencing it are left in place."""
    event_id = event.event_id
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s", event_id)
