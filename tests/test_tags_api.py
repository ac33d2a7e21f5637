from __future__ import annotations

import pytest


async def _create_contact(client, first_name: str, tag_ids: list[int]) -> dict:
    response = await client.post(
        "/api/v1/contacts",
        json={
            "first_name": first_name,
            "last_name": "Example",
            "company": "Acme",
            "position": "Engineer",
            "location": "Berlin",
            "tag_ids": tag_ids,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.anyio("asyncio")
async def test_tags_list_alphabetically_with_contact_counts(client):
    zebra = (await client.post("/api/v1/tags", json={"name": "zebra"})).json()["data"]
    alpha = (await client.post("/api/v1/tags", json={"name": "Alpha", "color": "#000000"})).json()[
        "data"
    ]
    await _create_contact(client, "One", [zebra["id"], alpha["id"]])
    await _create_contact(client, "Two", [zebra["id"]])

    response = await client.get("/api/v1/tags")

    assert response.status_code == 200
    tags = response.json()["data"]
    assert [(t["name"], t["contact_count"]) for t in tags] == [("Alpha", 1), ("zebra", 2)]
    assert tags[0]["text_color"] == "#ffffff"
    assert zebra["color"] == "#9b87f5"


@pytest.mark.anyio("asyncio")
async def test_tag_update_keeps_its_contacts(client):
    tag = (await client.post("/api/v1/tags", json={"name": "Lead"})).json()["data"]
    await _create_contact(client, "One", [tag["id"]])

    response = await client.put(
        f"/api/v1/tags/{tag['id']}", json={"name": "Hot lead", "color": "#f87171"}
    )

    assert response.status_code == 200
    body = response.json()["data"]
    assert body["name"] == "Hot lead"
    assert body["color"] == "#f87171"
    assert body["contact_count"] == 1


@pytest.mark.anyio("asyncio")
async def test_tag_rejects_invalid_color(client):
    response = await client.post("/api/v1/tags", json={"name": "Bad", "color": "red"})

    assert response.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_deleting_tag_detaches_it_from_contacts(client):
    tag = (await client.post("/api/v1/tags", json={"name": "VIP"})).json()["data"]
    keep = (await client.post("/api/v1/tags", json={"name": "Keep"})).json()["data"]
    first = await _create_contact(client, "One", [tag["id"], keep["id"]])
    await _create_contact(client, "Two", [tag["id"]])

    response = await client.delete(f"/api/v1/tags/{tag['id']}")

    assert response.status_code == 200
    body = response.json()["data"]
    assert body["affected_contacts"] == 2
    assert body["message"] == '"VIP" has been removed from 2 contacts.'

    remaining = await client.get(f"/api/v1/contacts/{first['id']}/tags")
    assert [t["id"] for t in remaining.json()["data"]] == [keep["id"]]

    filtered = await client.get("/api/v1/contacts", params={"tag_ids": str(tag["id"])})
    assert filtered.json()["data"] == []

    tags = await client.get("/api/v1/tags")
    assert [t["name"] for t in tags.json()["data"]] == ["Keep"]


@pytest.mark.anyio("asyncio")
async def test_deleting_unused_tag_reports_plain_deletion(client):
    tag = (await client.post("/api/v1/tags", json={"name": "Unused"})).json()["data"]

    response = await client.delete(f"/api/v1/tags/{tag['id']}")

    assert response.json()["data"]["message"] == '"Unused" has been deleted.'
    assert (await client.delete(f"/api/v1/tags/{tag['id']}")).status_code == 404


@pytest.mark.anyio("asyncio")
async def test_tag_palette(client):
    response = await client.get("/api/v1/tags/palette")

    assert response.status_code == 200
    palette = response.json()["data"]
    assert palette[0] == "#9b87f5"
    assert len(palette) == len(set(palette))
