"""Event API routes — public read by slug plus create/update/delete."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from devevents.database import ConnectionCache, get_connection_cache, get_db
from devevents.errors import ErrorCode, NotFound
from devevents.schemas.booking import BookingOut
from devevents.schemas.event import EventCreate, EventOut, EventPublic, EventUpdate
from devevents.services import booking_service, event_service
from devevents.validation import is_valid_slug

logger = logging.getLogger(__name__)
router = APIRouter()

CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=300"


def _error(code: ErrorCode, message: str) -> dict:
    return {"success": False, "error": {"code": code.value, "message": message}}


def lookup_public_event(slug: Optional[str], cache: ConnectionCache) -> tuple[int, dict, dict]:
    """Resolve a slug to the public event body.

    Returns ``(status_code, body, headers)``. Checks run in order: missing
    slug, malformed slug, connection/query failure, not found, found.
    """
    if not slug:
        return 400, _error(ErrorCode.missing_slug, "Parameter 'slug' is required."), {}
    if not is_valid_slug(slug):
        return (
            400,
            _error(ErrorCode.invalid_slug, "Parameter 'slug' must be a lowercase slug (a-z, 0-9, -)."),
            {},
        )

    try:
        db = cache.session()
        try:
            event = event_service.find_event_by_slug(db, slug)
            data = EventPublic.model_validate(event.public_fields()).model_dump()
        finally:
            db.close()
    except NotFound:
        return 404, _error(ErrorCode.not_found, "Event not found."), {}
    except Exception:
        logger.exception("GET /api/events/%s failed", slug)
        return 500, _error(ErrorCode.internal_server_error, "An unexpected error occurred."), {}

    return 200, {"success": True, "data": data}, {"Cache-Control": CACHE_CONTROL}


@router.get("/")
def list_events(db: Session = Depends(get_db)):
    """List the public projection of every event, newest first."""
    events = event_service.list_events(db)
    return {"success": True, "data": [EventPublic.model_validate(e.public_fields()).model_dump() for e in events]}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    """Create an event; the slug is derived from the title."""
    event = event_service.create_event(db, payload.model_dump(exclude_unset=True))
    return {"success": True, "data": EventOut.model_validate(event).model_dump(mode="json")}


@router.get("/{slug}")
def get_event(slug: str, cache: ConnectionCache = Depends(get_connection_cache)):
    """Public read of a single event by slug."""
    status_code, body, headers = lookup_public_event(slug, cache)
    return JSONResponse(content=body, status_code=status_code, headers=headers)


@router.patch("/{slug}")
def update_event(slug: str, payload: EventUpdate, db: Session = Depends(get_db)):
    """Partial update. The slug does not change when the title does."""
    event = event_service.find_event_by_slug(db, slug)
    event = event_service.update_event(db, event, payload.model_dump(exclude_unset=True))
    return {"success": True, "data": EventOut.model_validate(event).model_dump(mode="json")}


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(slug: str, db: Session = Depends(get_db)):
    """Delete an event. Its bookings are kept."""
    event = event_service.find_event_by_slug(db, slug)
    event_service.delete_event(db, event)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{slug}/bookings")
def list_event_bookings(slug: str, db: Session = Depends(get_db)):
    """Bookings for one event, with their count."""
    event = event_service.find_event_by_slug(db, slug)
    bookings = booking_service.find_bookings_by_event_id(db, event.event_id)
    return {
        "success": True,
        "data": {
            "count": booking_service.count_bookings_for_event(db, event.event_id),
            "bookings": [BookingOut.model_validate(b).model_dump(mode="json") for b in bookings],
        },
    }


@router.delete("/{slug}/bookings")
def delete_event_bookings(slug: str, db: Session = Depends(get_db)):
    """Remove every booking for an event, e.g. before deleting the event itself."""
    event = event_service.find_event_by_slug(db, slug)
    deleted = booking_service.delete_bookings_for_event(db, event.event_id)
    return {"success": True, "data": {"deleted": deleted}}
