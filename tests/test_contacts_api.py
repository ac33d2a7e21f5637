from __future__ import annotations

import pytest


async def _create_contact(client, **overrides) -> dict:
    payload = {
        "first_name": "Grace",
        "last_name": "Hopper",
        "company": "Navy",
        "position": "Rear Admiral",
        "location": "Arlington",
    }
    payload.update(overrides)
    response = await client.post("/api/v1/contacts", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _create_tag(client, name: str, color: str = "#9b87f5") -> dict:
    response = await client.post("/api/v1/tags", json={"name": name, "color": color})
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.anyio("asyncio")
async def test_contact_crud_roundtrip(client, contact_payload):
    created = await _create_contact(client, **contact_payload, connected_on="2024-01-15")
    assert created["first_name"] == "Ada"
    assert created["connected_on"] == "2024-01-15"
    assert created["tags"] == []

    fetched = await client.get(f"/api/v1/contacts/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["email"] == "ada@example.com"

    updated = await client.put(
        f"/api/v1/contacts/{created['id']}",
        json={"company": "Babbage & Co", "notes": "  ", "first_name": None},
    )
    assert updated.status_code == 200
    body = updated.json()["data"]
    assert body["company"] == "Babbage & Co"
    assert body["first_name"] == "Ada"
    assert body["notes"] is None

    deleted = await client.delete(f"/api/v1/contacts/{created['id']}")
    assert deleted.json()["data"] == {"deleted": True}

    missing = await client.get(f"/api/v1/contacts/{created['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.anyio("asyncio")
async def test_contact_requires_core_fields(client):
    response = await client.post(
        "/api/v1/contacts", json={"first_name": "Ada", "last_name": "Lovelace"}
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.anyio("asyncio")
async def test_contacts_are_scoped_to_their_owner(client):
    contact = await _create_contact(client)

    other_owner = {"X-User-Id": "user-2"}
    listing = await client.get("/api/v1/contacts", headers=other_owner)
    assert listing.status_code == 200
    assert listing.json()["data"] == []

    fetched = await client.get(f"/api/v1/contacts/{contact['id']}", headers=other_owner)
    assert fetched.status_code == 404


@pytest.mark.anyio("asyncio")
async def test_list_contacts_searches_filters_and_sorts(client):
    vip = await _create_tag(client, "VIP")
    friend = await _create_tag(client, "Friend")
    grace = await _create_contact(client, tag_ids=[vip["id"]])
    ada = await _create_contact(
        client,
        first_name="Ada",
        last_name="Lovelace",
        company="Analytical Engines",
        location="London",
        tag_ids=[friend["id"]],
    )
    alan = await _create_contact(
        client, first_name="Alan", last_name="Turing", company="Bletchley Park"
    )

    by_name = await client.get("/api/v1/contacts")
    assert [c["id"] for c in by_name.json()["data"]] == [ada["id"], alan["id"], grace["id"]]

    by_company_desc = await client.get(
        "/api/v1/contacts", params={"sort": "company", "direction": "desc"}
    )
    assert [c["id"] for c in by_company_desc.json()["data"]] == [
        grace["id"],
        alan["id"],
        ada["id"],
    ]

    search = await client.get("/api/v1/contacts", params={"q": "LONDON"})
    assert [c["id"] for c in search.json()["data"]] == [ada["id"]]

    either_tag = await client.get(
        "/api/v1/contacts", params={"tag_ids": f"{vip['id']},{friend['id']}"}
    )
    assert {c["id"] for c in either_tag.json()["data"]} == {grace["id"], ada["id"]}

    combined = await client.get(
        "/api/v1/contacts", params={"tag_ids": str(vip["id"]), "q": "ada"}
    )
    assert combined.json()["data"] == []


@pytest.mark.anyio("asyncio")
async def test_replace_and_toggle_reach_the_same_tag_set(client):
    red = await _create_tag(client, "Red", "#f87171")
    blue = await _create_tag(client, "Blue", "#60a5fa")
    green = await _create_tag(client, "Green", "#34d399")
    first = await _create_contact(client, tag_ids=[red["id"]])
    second = await _create_contact(client, first_name="Alan", tag_ids=[red["id"]])

    replaced = await client.put(
        f"/api/v1/contacts/{first['id']}/tags",
        json={"tag_ids": [blue["id"], green["id"], blue["id"]]},
    )
    assert replaced.status_code == 200

    for tag_id in (red["id"], blue["id"], green["id"]):
        toggled = await client.post(f"/api/v1/contacts/{second['id']}/tags/{tag_id}/toggle")
        assert toggled.status_code == 200

    first_tags = await client.get(f"/api/v1/contacts/{first['id']}/tags")
    second_tags = await client.get(f"/api/v1/contacts/{second['id']}/tags")
    assert [t["name"] for t in first_tags.json()["data"]] == ["Blue", "Green"]
    assert [t["id"] for t in first_tags.json()["data"]] == [
        t["id"] for t in second_tags.json()["data"]
    ]


@pytest.mark.anyio("asyncio")
async def test_toggle_reports_selection_state(client):
    tag = await _create_tag(client, "VIP")
    contact = await _create_contact(client)

    on = await client.post(f"/api/v1/contacts/{contact['id']}/tags/{tag['id']}/toggle")
    assert on.json()["data"]["selected"] is True
    assert [t["id"] for t in on.json()["data"]["tags"]] == [tag["id"]]

    off = await client.post(f"/api/v1/contacts/{contact['id']}/tags/{tag['id']}/toggle")
    assert off.json()["data"]["selected"] is False
    assert off.json()["data"]["tags"] == []


@pytest.mark.anyio("asyncio")
async def test_replace_with_unknown_tag_changes_nothing(client):
    tag = await _create_tag(client, "VIP")
    contact = await _create_contact(client, tag_ids=[tag["id"]])

    response = await client.put(
        f"/api/v1/contacts/{contact['id']}/tags", json={"tag_ids": [tag["id"], 999]}
    )
    assert response.status_code == 404

    tags = await client.get(f"/api/v1/contacts/{contact['id']}/tags")
    assert [t["id"] for t in tags.json()["data"]] == [tag["id"]]


@pytest.mark.anyio("asyncio")
async def test_malformed_tag_filter_is_rejected(client):
    await _create_contact(client)

    for value in ("abc", "1,x", "0"):
        response = await client.get("/api/v1/contacts", params={"tag_ids": value})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    export = await client.get("/api/v1/export/contacts.csv", params={"tag_ids": "abc"})
    assert export.status_code == 422
