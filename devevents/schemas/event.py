"""Pydantic schemas for Events.

Request bodies accept missing values so the domain validator can report them
with its own error codes.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class EventCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[str] = None
    audience: Optional[str] = None
    agenda: Optional[list[str]] = None
    organizer: Optional[str] = None
    tags: Optional[list[str]] = None


class EventUpdate(EventCreate):
    """Same fields as EventCreate; only the ones sent are applied."""


class EventOut(BaseModel):
    event_id: str
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventPublic(BaseModel):
    image: str
    title: str
    slug: str
    location: str
    date: str
    time: str

    model_config = {"from_attributes": True}
