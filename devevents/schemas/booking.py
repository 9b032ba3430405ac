"""Pydantic schemas for Bookings."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class BookingCreate(BaseModel):
    event_id: Optional[str] = None
    email: Optional[str] = None


class BookingUpdate(BaseModel):
    event_id: Optional[str] = None
    email: Optional[str] = None


class BookingOut(BaseModel):
    booking_id: str
    event_id: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
