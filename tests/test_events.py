"""Tests for Event create / read / update / delete.

Covers:
- Slug derivation at creation and uniqueness (DuplicateKey)
- Field trimming and timestamps
- Slug frozen on title update
- Deleting an event leaves its bookings
- Public read API: MISSING_SLUG / INVALID_SLUG / NOT_FOUND / 500 / 200 + caching
"""
import time

import pytest

from devevents.database import ConnectionCache, get_connection_cache
from devevents.errors import DuplicateKey, NotFound, RequiredFieldMissing
from devevents.main import app
from devevents.models.event import Event
from devevents.routers.events import CACHE_CONTROL, lookup_public_event
from devevents.services import booking_service, event_service
from tests.conftest import create_test_booking, create_test_event, event_payload

PUBLIC_FIELDS = {"image", "title", "slug", "location", "date", "time"}


class TestEventService:
    """Service-level behaviour against the database."""

    def test_create_sets_slug_and_timestamps(self, db):
        event = event_service.create_event(db, event_payload())
        assert event.event_id
        assert event.slug == "test-conference-2025"
        assert event.created_at is not None
        assert event.updated_at is not None

    def test_create_special_characters_scenario(self, db):
        event = event_service.create_event(db, event_payload(title="Event: 2025 @ #Tech!"))
        assert event.slug == "event-2025-tech"

    def test_create_trims_all_string_fields(self, db):
        event = event_service.create_event(db, event_payload(
            title="  Title  ", description="  Description  ", overview=" Overview ",
            venue=" Venue ", location=" Location ", mode=" Online ", audience=" All ",
            organizer=" Org ",
        ))
        assert event.title == "Title"
        assert event.description == "Description"
        assert event.overview == "Overview"
        assert event.venue == "Venue"
        assert event.location == "Location"
        assert event.mode == "Online"
        assert event.audience == "All"
        assert event.organizer == "Org"

    def test_duplicate_slug_rejected(self, db):
        event_service.create_event(db, event_payload(title="Same Title"))
        with pytest.raises(DuplicateKey):
            event_service.create_event(db, event_payload(title="  same   TITLE!! ", date="2025-12-02"))
        assert db.query(Event).count() == 1

    def test_invalid_fields_never_persist(self, db):
        with pytest.raises(RequiredFieldMissing):
            event_service.create_event(db, event_payload(venue=""))
        assert db.query(Event).count() == 0

    def test_keeps_multiple_agenda_items_and_tags(self, db):
        event = event_service.create_event(db, event_payload(agenda=["a", "b", "c"], tags=["x", "y", "z"]))
        assert event.agenda == ["a", "b", "c"]
        assert event.tags == ["x", "y", "z"]

    def test_find_by_slug(self, db):
        created = event_service.create_event(db, event_payload())
        found = event_service.find_event_by_slug(db, "test-conference-2025")
        assert found.event_id == created.event_id

    def test_find_by_slug_not_found(self, db):
        with pytest.raises(NotFound):
            event_service.find_event_by_slug(db, "nonexistent-slug")

    def test_update_bumps_updated_at_and_keeps_created_at(self, db):
        event = event_service.create_event(db, event_payload())
        created_at, updated_at = event.created_at, event.updated_at
        time.sleep(0.01)
        event = event_service.update_event(db, event, {"venue": "  Hall B  "})
        assert event.venue == "Hall B"
        assert event.created_at == created_at
        assert event.updated_at > updated_at

    def test_update_title_keeps_slug(self, db):
        event = event_service.create_event(db, event_payload(title="Original Title"))
        event = event_service.update_event(db, event, {"title": "Renamed Title"})
        assert event.title == "Renamed Title"
        assert event.slug == "original-title"

    def test_update_rejects_invalid_field(self, db):
        event = event_service.create_event(db, event_payload())
        with pytest.raises(RequiredFieldMissing):
            event_service.update_event(db, event, {"tags": None})
        db.refresh(event)
        assert event.tags == ["testing", "conference", "tech"]

    def test_delete_does_not_cascade_to_bookings(self, db):
        event = event_service.create_event(db, event_payload())
        event_id = event.event_id
        booking_service.create_booking(db, {"event_id": event_id, "email": "a@b.co"})
        event_service.delete_event(db, event)
        assert event_service.find_event_by_id(db, event_id) is None
        assert len(booking_service.find_bookings_by_event_id(db, event_id)) == 1

    def test_list_events_newest_first(self, db):
        event_service.create_event(db, event_payload(title="First"))
        time.sleep(0.01)
        event_service.create_event(db, event_payload(title="Second"))
        assert [e.slug for e in event_service.list_events(db)] == ["second", "first"]


class TestLookupPublicEvent:
    """Decision order of the read handler, called directly."""

    def test_missing_slug(self, cache):
        for slug in (None, ""):
            status_code, body, headers = lookup_public_event(slug, cache)
            assert status_code == 400
            assert body["error"]["code"] == "MISSING_SLUG"
            assert headers == {}

    def test_invalid_slug_checked_before_connecting(self):
        calls = []
        cache = ConnectionCache("sqlite://", connector=lambda url: calls.append(url))
        status_code, body, _ = lookup_public_event("INVALID_SLUG", cache)
        assert status_code == 400
        assert body == {
            "success": False,
            "error": {
                "code": "INVALID_SLUG",
                "message": "Parameter 'slug' must be a lowercase slug (a-z, 0-9, -).",
            },
        }
        assert calls == []

    def test_configuration_error_is_internal(self):
        status_code, body, _ = lookup_public_event("some-event", ConnectionCache(None))
        assert status_code == 500
        assert body["error"]["code"] == "INTERNAL_SERVER_ERROR"


class TestEventReadAPI:
    """GET /api/events/{slug}"""

    def test_get_event_returns_public_fields(self, client):
        create_test_event(client)
        resp = client.get("/api/events/test-conference-2025")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert set(body["data"]) == PUBLIC_FIELDS
        assert body["data"] == {
            "image": "/images/test-event.png",
            "title": "Test Conference 2025",
            "slug": "test-conference-2025",
            "location": "San Francisco, CA",
            "date": "2025-12-01",
            "time": "09:00",
        }
        assert resp.headers["cache-control"] == CACHE_CONTROL

    def test_get_event_invalid_slug(self, client):
        resp = client.get("/api/events/INVALID_SLUG")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_SLUG"

    def test_get_event_slug_too_long(self, client):
        resp = client.get("/api/events/" + "a" * 101)
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_SLUG"

    def test_get_event_not_found(self, client):
        resp = client.get("/api/events/nonexistent-slug")
        assert resp.status_code == 404
        assert resp.json() == {
            "success": False,
            "error": {"code": "NOT_FOUND", "message": "Event not found."},
        }
        assert "cache-control" not in resp.headers

    def test_get_event_connection_failure(self, client, caplog):
        def refuse(url):
            raise RuntimeError("connection refused: secret-host:5432")

        app.dependency_overrides[get_connection_cache] = lambda: ConnectionCache("sqlite://", connector=refuse)
        resp = client.get("/api/events/some-event")
        assert resp.status_code == 500
        body = resp.json()
        assert body["error"] == {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "An unexpected error occurred.",
        }
        assert "secret-host" not in resp.text
        assert "GET /api/events/some-event failed" in caplog.text


class TestEventWriteAPI:
    """POST / PATCH / DELETE /api/events"""

    def test_create_event(self, client):
        data = create_test_event(client, title="React Summit 2025")
        assert data["slug"] == "react-summit-2025"
        assert data["agenda"] == ["Opening keynote", "Technical sessions", "Networking"]
        assert "created_at" in data and "updated_at" in data

    def test_create_event_missing_field(self, client):
        payload = event_payload()
        del payload["organizer"]
        resp = client.post("/api/events/", json=payload)
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "REQUIRED_FIELD_MISSING"
        assert "organizer" in resp.json()["error"]["message"]

    def test_create_event_bad_time(self, client):
        resp = client.post("/api/events/", json=event_payload(time="25:00"))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_FORMAT"

    def test_create_event_empty_tags(self, client):
        resp = client.post("/api/events/", json=event_payload(tags=[]))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "EMPTY_COLLECTION"

    def test_create_event_wrong_type(self, client):
        resp = client.post("/api/events/", json=event_payload(agenda="not a list"))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_FORMAT"

    def test_create_duplicate_slug(self, client):
        create_test_event(client, title="Same Title")
        resp = client.post("/api/events/", json=event_payload(title="Same Title!"))
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "DUPLICATE_KEY"

    def test_list_events(self, client):
        create_test_event(client, title="First Event")
        create_test_event(client, title="Second Event")
        resp = client.get("/api/events/")
        assert resp.status_code == 200
        slugs = {e["slug"] for e in resp.json()["data"]}
        assert slugs == {"first-event", "second-event"}
        assert all(set(e) == PUBLIC_FIELDS for e in resp.json()["data"])

    def test_update_event(self, client):
        create_test_event(client)
        resp = client.patch("/api/events/test-conference-2025", json={"title": "New Name", "time": "18:45"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["title"] == "New Name"
        assert data["time"] == "18:45"
        assert data["slug"] == "test-conference-2025"

    def test_update_missing_event(self, client):
        resp = client.patch("/api/events/nope", json={"title": "x"})
        assert resp.status_code == 404

    def test_delete_event_keeps_bookings(self, client):
        event = create_test_event(client)
        create_test_booking(client, event["event_id"])
        resp = client.delete("/api/events/test-conference-2025")
        assert resp.status_code == 204
        assert client.get("/api/events/test-conference-2025").status_code == 404
        bookings = client.get(f"/api/bookings/?event_id={event['event_id']}").json()["data"]
        assert len(bookings) == 1

    def test_event_bookings(self, client):
        event = create_test_event(client)
        create_test_booking(client, event["event_id"], "one@example.com")
        create_test_booking(client, event["event_id"], "two@example.com")
        resp = client.get("/api/events/test-conference-2025/bookings")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["count"] == 2
        assert [b["email"] for b in data["bookings"]] == ["one@example.com", "two@example.com"]

    def test_delete_event_bookings(self, client):
        event = create_test_event(client)
        other = create_test_event(client, title="Other Conference 2025")
        create_test_booking(client, event["event_id"], "one@example.com")
        create_test_booking(client, event["event_id"], "two@example.com")
        create_test_booking(client, other["event_id"], "three@example.com")
        resp = client.delete("/api/events/test-conference-2025/bookings")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": {"deleted": 2}}
        assert client.get("/api/events/test-conference-2025/bookings").json()["data"]["count"] == 0
        assert client.get("/api/events/other-conference-2025/bookings").json()["data"]["count"] == 1

    def test_delete_bookings_for_missing_event(self, client):
        resp = client.delete("/api/events/nope/bookings")
        assert resp.status_code == 404

    def test_create_event_title_too_long(self, client):
        resp = client.post("/api/events/", json=event_payload(title="T" * 256))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_FORMAT"
        assert client.get("/api/events/").json()["data"] == []


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
