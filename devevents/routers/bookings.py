"""Booking API routes."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from devevents.database import get_db
from devevents.models.booking import Booking
from devevents.schemas.booking import BookingCreate, BookingOut, BookingUpdate
from devevents.services import booking_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _out(booking: Booking) -> dict:
    return BookingOut.model_validate(booking).model_dump(mode="json")


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_booking(payload: BookingCreate, db: Session = Depends(get_db)):
    """Book an email onto an existing event."""
    booking = booking_service.create_booking(db, payload.model_dump())
    return {"success": True, "data": _out(booking)}


@router.get("/")
def list_bookings(
    event_id: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List bookings filtered by event or email."""
    if event_id is not None:
        bookings = booking_service.find_bookings_by_event_id(db, event_id)
        if email is not None:
            bookings = [b for b in bookings if b.email == email.strip().lower()]
    elif email is not None:
        bookings = booking_service.find_bookings_by_email(db, email)
    else:
        bookings = db.query(Booking).order_by(Booking.created_at).all()
    return {"success": True, "data": [_out(b) for b in bookings]}


@router.get("/{booking_id}")
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    return {"success": True, "data": _out(booking_service.get_booking(db, booking_id))}


@router.patch("/{booking_id}")
def update_booking(booking_id: str, payload: BookingUpdate, db: Session = Depends(get_db)):
    """Change the email or move the booking to another existing event."""
    booking = booking_service.get_booking(db, booking_id)
    booking = booking_service.update_booking(db, booking, payload.model_dump(exclude_unset=True))
    return {"success": True, "data": _out(booking)}


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(booking_id: str, db: Session = Depends(get_db)):
    booking_service.delete_booking(db, booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
