"""Event card rendering — an HTML fragment built from the six public fields."""
from html import escape
from typing import Any, Mapping


def _row(icon: str, alt: str, text: str) -> str:
    return (
        f'<div class="flex-row gap-2">'
        f'<img src="/icons/{icon}.svg" alt="{alt}" width="14" height="14" />'
        f"<p>{escape(text)}</p>"
        f"</div>"
    )


def render_event_card(event: Mapping[str, Any]) -> str:
    """Render an event card linking to ``/events/{slug}``.

    ``event`` is the public projection (image, title, slug, location, date,
    time). Pure function: same input, same markup.
    """
    title = escape(str(event["title"]))
    slug = escape(str(event["slug"]))
    image = escape(str(event["image"]))
    return (
        f'<a href="/events/{slug}" id="event-card" class="event-card">'
        f'<img src="{image}" alt="{title}" width="410" height="300" class="poster" />'
        f'{_row("pin", "location", str(event["location"]))}'
        f'<p class="title">{title}</p>'
        f'<div class="datetime">'
        f'{_row("calendar", "date", str(event["date"]))}'
        f'{_row("clock", "time", str(event["time"]))}'
        f"</div>"
        f"</a>"
    )
