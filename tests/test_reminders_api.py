from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest


async def _create_contact(client) -> dict:
    response = await client.post(
        "/api/v1/contacts",
        json={
            "first_name": "Ada",
            "last_name": "Lovelace",
            "company": "Analytical Engines",
            "position": "Mathematician",
            "location": "London",
        },
    )
    return response.json()["data"]


async def _create_reminder(client, contact_id: int, **overrides) -> dict:
    payload = {
        "contact_id": contact_id,
        "title": "Check in",
        "date": "2024-06-01T15:00:00",
        "channel": "Call",
        "notes": "Ask about the engine",
    }
    payload.update(overrides)
    response = await client.post("/api/v1/reminders", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.anyio("asyncio")
async def test_reminder_lifecycle(client):
    contact = await _create_contact(client)
    reminder = await _create_reminder(client, contact["id"])
    assert reminder["is_active"] is True
    assert reminder["completed_at"] is None

    updated = await client.put(
        f"/api/v1/reminders/{reminder['id']}", json={"title": "Call Ada", "notes": None}
    )
    assert updated.json()["data"]["title"] == "Call Ada"
    assert updated.json()["data"]["notes"] is None
    assert updated.json()["data"]["channel"] == "Call"

    deleted = await client.delete(f"/api/v1/reminders/{reminder['id']}")
    assert deleted.json()["data"] == {"deleted": True}
    assert (await client.delete(f"/api/v1/reminders/{reminder['id']}")).status_code == 404


@pytest.mark.anyio("asyncio")
async def test_reminder_for_unknown_contact_is_rejected(client):
    response = await client.post(
        "/api/v1/reminders",
        json={"contact_id": 999, "title": "Ghost", "date": "2024-06-01T15:00:00"},
    )

    assert response.status_code == 404


@pytest.mark.anyio("asyncio")
async def test_completing_twice_changes_nothing_the_second_time(client):
    contact = await _create_contact(client)
    reminder = await _create_reminder(client, contact["id"])

    first = await client.post(f"/api/v1/reminders/{reminder['id']}/complete")
    assert first.status_code == 200
    completed = first.json()["data"]["reminder"]
    assert completed["is_active"] is False
    assert completed["completed_at"] is not None
    assert first.json()["data"]["interaction_draft"] is None

    second = await client.post(f"/api/v1/reminders/{reminder['id']}/complete")
    assert second.json()["data"]["reminder"] == completed


@pytest.mark.anyio("asyncio")
async def test_completion_offers_a_draft_without_logging_it(client):
    contact = await _create_contact(client)
    reminder = await _create_reminder(client, contact["id"], channel="WhatsApp")

    response = await client.post(
        f"/api/v1/reminders/{reminder['id']}/complete", json={"log_interaction": True}
    )

    draft = response.json()["data"]["interaction_draft"]
    assert draft["contact_id"] == contact["id"]
    assert draft["type"] == "WhatsApp"
    assert draft["notes"] == "Follow-up from reminder: Check in\n\nAsk about the engine"

    interactions = await client.get(f"/api/v1/contacts/{contact['id']}/interactions")
    assert interactions.json()["data"] == []

    standalone = await client.get(f"/api/v1/reminders/{reminder['id']}/interaction-draft")
    assert standalone.json()["data"]["type"] == "WhatsApp"


@pytest.mark.anyio("asyncio")
async def test_reminders_list_active_first(client):
    contact = await _create_contact(client)
    old = await _create_reminder(client, contact["id"], date="2024-01-01T09:00:00")
    new = await _create_reminder(client, contact["id"], date="2024-12-01T09:00:00")
    done = await _create_reminder(client, contact["id"], date="2025-01-01T09:00:00")
    await client.post(f"/api/v1/reminders/{done['id']}/complete")

    listing = await client.get("/api/v1/reminders")
    assert [r["id"] for r in listing.json()["data"]] == [new["id"], old["id"], done["id"]]

    active = await client.get("/api/v1/reminders", params={"is_active": "true"})
    assert [r["id"] for r in active.json()["data"]] == [new["id"], old["id"]]

    for_contact = await client.get("/api/v1/reminders", params={"contact_id": 999})
    assert for_contact.json()["data"] == []


@pytest.mark.anyio("asyncio")
async def test_calendar_link_leaves_reminder_untouched(client):
    contact = await _create_contact(client)
    reminder = await _create_reminder(client, contact["id"])

    response = await client.get(f"/api/v1/reminders/{reminder['id']}/calendar-link")

    assert response.status_code == 200
    params = parse_qs(urlparse(response.json()["data"]["url"]).query)
    assert params["text"] == ["Check in"]
    assert params["dates"] == ["20240601T150000/20240601T160000"]
    assert params["details"] == ["Ask about the engine\n\nChannel: Call"]

    listing = await client.get("/api/v1/reminders")
    assert listing.json()["data"][0]["is_active"] is True


@pytest.mark.anyio("asyncio")
async def test_reminder_listing_shows_who_it_is_for(client):
    contact = await _create_contact(client)
    await _create_reminder(client, contact["id"])

    listing = await client.get("/api/v1/reminders")

    shown = listing.json()["data"][0]["contact"]
    assert shown["id"] == contact["id"]
    assert (shown["first_name"], shown["last_name"]) == ("Ada", "Lovelace")
    assert shown["company"] == "Analytical Engines"


@pytest.mark.anyio("asyncio")
async def test_reminder_writes_return_the_contact_summary(client):
    contact = await _create_contact(client)
    reminder = await _create_reminder(client, contact["id"])
    assert reminder["contact"]["last_name"] == "Lovelace"

    completed = await client.post(f"/api/v1/reminders/{reminder['id']}/complete")
    assert completed.json()["data"]["reminder"]["contact"]["first_name"] == "Ada"


@pytest.mark.anyio("asyncio")
async def test_reminder_channels(client):
    response = await client.get("/api/v1/reminders/channels")

    assert response.status_code == 200
    channels = response.json()["data"]
    assert channels[0] == "Email"
    assert "WhatsApp" in channels
