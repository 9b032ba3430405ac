"""Event ORM model."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, JSON
from devevents.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(String(500), nullable=False)
    venue = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    time = Column(String(5), nullable=False)  # HH:MM, 24h
    mode = Column(String(50), nullable=False)
    audience = Column(String(255), nullable=False)
    agenda = Column(JSON, nullable=False, default=list)
    organizer = Column(String(255), nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def public_fields(self) -> dict[str, str]:
        """The six fields exposed by the public read API, coerced to strings."""
        return {
            "image": str(self.image),
            "title": str(self.title),
            "slug": str(self.slug),
            "location": str(self.location),
            "date": str(self.date),
            "time": str(self.time),
        }
