"""Booking service.

The event lookup is passed in (``find_event``) rather than reached for
implicitly, so the referential check is one plain call: a booking may only be
written when its event exists at that moment. The check runs on create and
whenever ``event_id`` changes.
"""
import logging
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.orm import Session

from devevents.errors import DanglingReference, NotFound
from devevents.models.booking import Booking
from devevents.models.event import Event, utcnow
from devevents.services import event_service
from devevents.validation import normalize_email, parse_event_id

logger = logging.getLogger(__name__)

EventLookup = Callable[[Session, str], Optional[Event]]


def _check_event_exists(db: Session, event_id: str, find_event: EventLookup) -> None:
    if find_event(db, event_id) is None:
        raise DanglingReference(
            "Cannot create booking: referenced event does not exist.", field="event_id"
        )


def create_booking(
    db: Session,
    fields: Mapping[str, Any],
    find_event: EventLookup = event_service.find_event_by_id,
) -> Booking:
    """Validate and insert a booking. Nothing is written if any check fails."""
    event_id = parse_event_id(fields.get("event_id"))
    email = normalize_email(fields.get("email"))
    _check_event_exists(db, event_id, find_event)

    now = utcnow()
    booking = Booking(event_id=event_id, email=email, created_at=now, updated_at=now)
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("Created booking %s for event %s", booking.booking_id, event_id)
    return booking


def get_booking(db: Session, booking_id: str) -> Booking:
    booking = db.query(Booking).filter(Booking.booking_id == booking_id).first()
    if not booking:
        raise NotFound("Booking not found.")
    return booking


def find_bookings_by_event_id(db: Session, event_id: str) -> list[Booking]:
    """Bookings for one event, oldest first. Malformed ids raise InvalidReference."""
    event_id = parse_event_id(event_id)
    return (
        db.query(Booking)
        .filter(Booking.event_id == event_id)
        .order_by(Booking.created_at)
        .all()
    )


def find_bookings_by_email(db: Session, email: str) -> list[Booking]:
    email = normalize_email(email)
    return db.query(Booking).filter(Booking.email == email).order_by(Booking.created_at).all()


def count_bookings_for_event(db: Session, event_id: str) -> int:
    event_id = parse_event_id(event_id)
    return db.query(Booking).filter(Booking.event_id == event_id).count()


def update_booking(
    db: Session,
    booking: Booking,
    fields: Mapping[str, Any],
    find_event: EventLookup = event_service.find_event_by_id,
) -> Booking:
    """Apply a partial update; re-check the event only when ``event_id`` changes."""
    email = normalize_email(fields["email"]) if "email" in fields else booking.email
    event_id = parse_event_id(fields["event_id"]) if "event_id" in fields else booking.event_id
    if event_id != booking.event_id:
        _check_event_exists(db, event_id, find_event)

    booking.email = email
    booking.event_id = event_id
    booking.updated_at = utcnow()
    db.commit()
    db.refresh(booking)
    logger.info("Updated booking %s", booking.booking_id)
    return booking


def delete_booking(db: Session, booking_id: str) -> None:
    booking = get_booking(db, booking_id)
    db.delete(booking)
    db.commit()
    logger.info("Deleted booking %s", booking_id)


def delete_bookings_for_event(db: Session, event_id: str) -> int:
    """Remove every booking for an event; returns how many were deleted."""
    event_id = parse_event_id(event_id)
    deleted = db.query(Booking).filter(Booking.event_id == event_id).delete()
    db.commit()
    logger.info("Deleted %d bookings for event %s", deleted, event_id)
    return deleted
