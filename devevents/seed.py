"""Featured events and the CLI that loads them.

Usage: ``python -m devevents.seed`` (needs DATABASE_URL).
"""
import logging

import typer
from sqlalchemy.orm import Session

from devevents.database import connection_cache
from devevents.models.event import Event
from devevents.services import event_service
from devevents.validation import slugify

logger = logging.getLogger(__name__)

FEATURED_EVENTS = [
    {
        "title": "React Summit US 2025",
        "description": "The biggest React conference in the US, with talks on the latest in React, Next.js and the wider ecosystem.",
        "overview": "Two days of talks, workshops and networking for React developers.",
        "image": "/images/event1.png",
        "venue": "Liberty Science Center",
        "location": "Jersey City, NJ, USA",
        "date": "2025-11-18",
        "time": "09:00",
        "mode": "Hybrid",
        "audience": "Frontend developers",
        "agenda": ["Opening keynote", "React Server Components in practice", "Performance panel"],
        "organizer": "GitNation",
        "tags": ["react", "javascript", "frontend"],
    },
    {
        "title": "KubeCon + CloudNativeCon Europe 2026",
        "description": "The flagship conference of the Cloud Native Computing Foundation.",
        "overview": "Maintainers and end users share what is next for Kubernetes and cloud native tooling.",
        "image": "/images/event2.png",
        "venue": "Amsterdam RAI",
        "location": "Amsterdam, Netherlands",
        "date": "2026-03-23",
        "time": "10:00",
        "mode": "In-person",
        "audience": "Platform engineers",
        "agenda": ["Keynotes", "Project updates", "Maintainer track"],
        "organizer": "CNCF",
        "tags": ["kubernetes", "cloud-native", "devops"],
    },
    {
        "title": "AWS re:Invent 2025",
        "description": "A learning conference for the global cloud computing community.",
        "overview": "Launch announcements, deep-dive sessions and hands-on labs across AWS services.",
        "image": "/images/event3.png",
        "venue": "The Venetian",
        "location": "Las Vegas, NV, USA",
        "date": "2025-12-01",
        "time": "08:00",
        "mode": "Hybrid",
        "audience": "Cloud engineers",
        "agenda": ["CEO keynote", "Breakout sessions", "Builder labs"],
        "organizer": "Amazon Web Services",
        "tags": ["aws", "cloud"],
    },
    {
        "title": "Next.js Conf 2025",
        "description": "The annual conference for the Next.js community.",
        "overview": "Product announcements and talks from the Next.js team and community.",
        "image": "/images/event4.png",
        "venue": "Online",
        "location": "San Francisco, CA, USA",
        "date": "2025-10-22",
        "time": "09:00",
        "mode": "Online",
        "audience": "Web developers",
        "agenda": ["Keynote", "App Router deep dive", "Community talks"],
        "organizer": "Vercel",
        "tags": ["nextjs", "react", "web"],
    },
    {
        "title": "Google Cloud Next 2026",
        "description": "Google Cloud's conference on AI, infrastructure and data.",
        "overview": "Sessions on building and running applications on Google Cloud.",
        "image": "/images/event5.png",
        "venue": "Mandalay Bay",
        "location": "Las Vegas, NV, USA",
        "date": "2026-04-22",
        "time": "09:30",
        "mode": "In-person",
        "audience": "Developers and IT leaders",
        "agenda": ["Opening keynote", "Developer keynote", "Spotlight sessions"],
        "organizer": "Google Cloud",
        "tags": ["gcp", "cloud", "ai"],
    },
    {
        "title": "PyCon US 2026",
        "description": "The largest annual gathering of the Python community.",
        "overview": "Tutorials, talks and sprints for Python developers of every level.",
        "image": "/images/event6.png",
        "venue": "Long Beach Convention Center",
        "location": "Long Beach, CA, USA",
        "date": "2026-05-13",
        "time": "09:00",
        "mode": "In-person",
        "audience": "Python developers",
        "agenda": ["Tutorials", "Talks", "Development sprints"],
        "organizer": "Python Software Foundation",
        "tags": ["python", "open-source"],
    },
    {
        "title": "JSNation 2026",
        "description": "A JavaScript conference covering the language, runtimes and tooling.",
        "overview": "Talks from library authors and runtime maintainers.",
        "image": "/images/event7.png",
        "venue": "Zuiderpark",
        "location": "Amsterdam, Netherlands",
        "date": "2026-06-11",
        "time": "10:00",
        "mode": "Hybrid",
        "audience": "JavaScript developers",
        "agenda": ["Runtime updates", "Tooling talks", "Lightning talks"],
        "organizer": "GitNation",
        "tags": ["javascript", "node"],
    },
]


def seed_events(db: Session) -> int:
    """Insert the featured events that are not stored yet; returns how many were added."""
    existing = {slug for (slug,) in db.query(Event.slug).all()}
    added = 0
    for fields in FEATURED_EVENTS:
        if slugify(fields["title"]) in existing:
            continue
        event_service.create_event(db, fields)
        added += 1
    logger.info("Seeded %d of %d featured events", added, len(FEATURED_EVENTS))
    return added


cli = typer.Typer(help="Dev Events maintenance commands")


@cli.command()
def seed():
    """Load the featured events into the database."""
    db = connection_cache.session()
    try:
        added = seed_events(db)
    finally:
        db.close()
    typer.echo(f"Added {added} featured events")


if __name__ == "__main__":
    cli()
