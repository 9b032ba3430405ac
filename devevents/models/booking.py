"""Booking ORM model.

``event_id`` is a plain indexed column, not a foreign key: deleting an event
leaves its bookings in place. Existence is checked at write time by
booking_service.
"""
import uuid
from sqlalchemy import Column, String, DateTime
from devevents.database import Base
from devevents.models.event import utcnow


class Booking(Base):
    __tablename__ = "bookings"

    booking_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), nullable=False, index=True)
    email = Column(String(320), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
